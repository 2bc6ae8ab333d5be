"""mnacore Time-Domain (Transient) Simulation Module.

This module provides JAX-compiled transient simulation using Modified Nodal
Analysis (MNA) with backward-Euler companion models.

Stamping:
    - Resistor / Wire: conductance 1/max(R, 1e-6) (wires use 1e-6 ohm)
    - Capacitor: Ceq = C/dt plus history current Ceq * v_prev
    - Inductor: branch current unknown, diagonal -L/dt, RHS -(L/dt) * i_prev
    - Voltage source: branch current unknown, RHS = source value at t
    - Current source: RHS injection only
"""

from .config import SimulationConfig, DEFAULT_SIM_CONFIG
from .results import SimulationResult, SimulationMetrics
from .simulator import (
    SimState,
    StepOutput,
    CompiledNetlist,
    TransientFns,
    compile_netlist,
    simulate,
)

__all__ = [
    # Configuration
    "SimulationConfig",
    "DEFAULT_SIM_CONFIG",
    # Simulation
    "SimState",
    "StepOutput",
    "CompiledNetlist",
    "TransientFns",
    "compile_netlist",
    "simulate",
    # Results
    "SimulationResult",
    "SimulationMetrics",
]
