"""mnacore - lumped circuit analysis with Modified Nodal Analysis.

This package provides two analysis domains over one netlist format:
    - timedomain: Transient simulation (backward Euler, JAX-compiled steps)
    - laplace: Closed-form symbolic solution in s (SymPy)

Usage:
    from mnacore import Resistor, VoltageSource, Ground
    from mnacore.timedomain import simulate, SimulationConfig
    from mnacore.laplace import solve_symbolic

Importing the package enables 64-bit floats in JAX.
"""

import jax

jax.config.update("jax_enable_x64", True)

from .components import (  # noqa: E402
    Wire,
    Ground,
    Resistor,
    Capacitor,
    Inductor,
    VoltageSource,
    CurrentSource,
    Component,
    COMPONENT_TYPES,
    ac_parameters,
    from_dict,
    parse_netlist,
    source_value,
)
from .errors import CircuitError, ConfigurationError, SingularMatrixError  # noqa: E402
from .topology import Topology, build_topology, extract_nodes  # noqa: E402

__version__ = "0.1.0"
__all__ = [
    "timedomain",
    "laplace",
    "__version__",
    # Components
    "Wire",
    "Ground",
    "Resistor",
    "Capacitor",
    "Inductor",
    "VoltageSource",
    "CurrentSource",
    "Component",
    "COMPONENT_TYPES",
    "ac_parameters",
    "from_dict",
    "parse_netlist",
    "source_value",
    # Topology
    "Topology",
    "build_topology",
    "extract_nodes",
    # Errors
    "CircuitError",
    "ConfigurationError",
    "SingularMatrixError",
]
