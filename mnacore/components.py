"""Circuit component variants (immutable/functional style).

A netlist is a plain sequence of these records. Every variant shares the
``(id, from_node, to_node)`` node pair and carries a ``kind`` tag used for
dispatch; the payload depends on the kind:

    - Wire: no payload (stamped as a tiny fixed resistance)
    - Ground: binds one or two node names to the reference node
    - Resistor, Capacitor, Inductor: ``value`` in ohms/farads/henrys
    - VoltageSource, CurrentSource: ``waveform`` ("dc" or "ac"), ``value``
      and the optional AC parameters

The editor serialises components as dicts with ``"from"``/``"to"`` keys;
``from_dict`` and ``parse_netlist`` convert those.
"""

from __future__ import annotations
import math
from typing import NamedTuple, Union, Iterable, Mapping, Any

from .constants import DEFAULT_AC_FREQUENCY
from .errors import ConfigurationError


class Wire(NamedTuple):
    """Ideal connection between two nodes."""
    id: str
    from_node: str
    to_node: str
    kind = "wire"


class Ground(NamedTuple):
    """Binds ``from_node`` (and ``to_node`` if given) to the reference node."""
    id: str
    from_node: str
    to_node: str | None = None
    kind = "ground"


class Resistor(NamedTuple):
    id: str
    from_node: str
    to_node: str
    value: float  # Ohms
    kind = "resistor"


class Capacitor(NamedTuple):
    id: str
    from_node: str
    to_node: str
    value: float  # Farads
    kind = "capacitor"


class Inductor(NamedTuple):
    id: str
    from_node: str
    to_node: str
    value: float  # Henrys
    kind = "inductor"


class VoltageSource(NamedTuple):
    """
    Independent voltage source, V(from_node) - V(to_node) = value(t).

    For waveform="ac":
        value(t) = offset + amplitude * sin(2*pi*frequency*t + phase)
    """
    id: str
    from_node: str
    to_node: str
    waveform: str = "dc"
    value: float = 0.0  # Volts (DC level)
    amplitude: float | None = None
    frequency: float | None = None  # Hz
    phase: float | None = None  # radians
    offset: float | None = None
    kind = "voltage-source"


class CurrentSource(NamedTuple):
    """
    Independent current source driving value(t) into ``from_node``
    and out of ``to_node`` through the external network.
    """
    id: str
    from_node: str
    to_node: str
    waveform: str = "dc"
    value: float = 0.0  # Amperes (DC level)
    amplitude: float | None = None
    frequency: float | None = None
    phase: float | None = None
    offset: float | None = None
    kind = "current-source"


Component = Union[Wire, Ground, Resistor, Capacitor, Inductor, VoltageSource, CurrentSource]
Source = Union[VoltageSource, CurrentSource]

COMPONENT_TYPES: dict[str, type] = {
    cls.kind: cls
    for cls in (Wire, Ground, Resistor, Capacitor, Inductor, VoltageSource, CurrentSource)
}

PASSIVE_KINDS = ("resistor", "capacitor", "inductor")
SOURCE_KINDS = ("voltage-source", "current-source")


def ac_parameters(source: Source) -> tuple[float, float, float, float]:
    """
    Resolve (amplitude, frequency, phase, offset) with editor defaults.

    A missing amplitude falls back to the DC ``value``.
    """
    amplitude = source.amplitude if source.amplitude is not None else source.value
    frequency = source.frequency if source.frequency is not None else DEFAULT_AC_FREQUENCY
    phase = source.phase if source.phase is not None else 0.0
    offset = source.offset if source.offset is not None else 0.0
    return float(amplitude), float(frequency), float(phase), float(offset)


def source_value(source: Source, t: float) -> float:
    """Evaluate a source's excitation at time t (seconds)."""
    if source.waveform == "ac":
        amplitude, frequency, phase, offset = ac_parameters(source)
        return offset + amplitude * math.sin(2.0 * math.pi * frequency * t + phase)
    return float(source.value)


def _optional_float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    return None if value is None else float(value)


def from_dict(data: Mapping[str, Any]) -> Component:
    """
    Build a component from the editor's dict representation.

    Example:
        from_dict({"id": "r1", "kind": "resistor", "from": "a", "to": "b", "value": 1e3})
    """
    kind = data.get("kind")
    comp_id = str(data.get("id", ""))
    if kind not in COMPONENT_TYPES:
        raise ConfigurationError(f"Unknown component kind: {kind!r}", component_id=comp_id or None)

    from_node = data.get("from")
    to_node = data.get("to")

    if kind == "ground":
        if not from_node:
            raise ConfigurationError("Ground component needs a 'from' node", component_id=comp_id)
        return Ground(comp_id, str(from_node), str(to_node) if to_node else None)

    if from_node is None or to_node is None:
        raise ConfigurationError(
            f"Component {comp_id!r} needs both 'from' and 'to' nodes", component_id=comp_id
        )

    if kind == "wire":
        return Wire(comp_id, str(from_node), str(to_node))

    if kind in PASSIVE_KINDS:
        if data.get("value") is None:
            raise ConfigurationError(f"Component {comp_id!r} has no value", component_id=comp_id)
        return COMPONENT_TYPES[kind](comp_id, str(from_node), str(to_node), float(data["value"]))

    waveform = data.get("waveform", "dc")
    if waveform not in ("dc", "ac"):
        raise ConfigurationError(f"Unknown waveform: {waveform!r}", component_id=comp_id)
    return COMPONENT_TYPES[kind](
        comp_id,
        str(from_node),
        str(to_node),
        waveform=waveform,
        value=float(data.get("value") or 0.0),
        amplitude=_optional_float(data, "amplitude"),
        frequency=_optional_float(data, "frequency"),
        phase=_optional_float(data, "phase"),
        offset=_optional_float(data, "offset"),
    )


def parse_netlist(items: Iterable[Mapping[str, Any] | Component | None]) -> list[Component]:
    """Convert a mixed list of dicts/components, dropping empty entries."""
    components = []
    for item in items:
        if not item:
            continue
        if isinstance(item, Mapping):
            components.append(from_dict(item))
        else:
            components.append(item)
    return components
