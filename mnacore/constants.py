"""Numerical floors and naming conventions shared by both analysis domains."""

CANONICAL_GROUND = "gnd"

# Node names that are always the reference node, bound or not.
GROUND_NAMES = frozenset({"0", "gnd", "ground", "GND", "GROUND"})

MIN_RESISTANCE = 1e-6  # Ohms
WIRE_RESISTANCE = 1e-6  # Ohms
MIN_DT = 1e-6  # seconds
PIVOT_TOLERANCE = 1e-9

DEFAULT_AC_FREQUENCY = 50.0  # Hz
