"""Transient result containers."""

from __future__ import annotations
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from ..constants import GROUND_NAMES


class SimulationMetrics(NamedTuple):
    """Per-run profiling counters (milliseconds)."""
    steps: int
    assembly_ms: float
    solve_ms: float
    matrix_size: int
    component_count: int


class SimulationResult(NamedTuple):
    """
    Time series of one transient run; every series has one sample per step.

    Sign conventions:
        component_currents[id]: current from ``from_node`` to ``to_node``
            through the component (current sources: the excitation value)
        node_currents[node]: sum of component currents leaving the node,
            zero at every step when KCL holds
    """
    time: Array  # (steps,)
    node_voltages: dict[str, Array]
    node_currents: dict[str, Array]
    component_currents: dict[str, Array]
    metrics: SimulationMetrics
    ground_aliases: frozenset[str] = frozenset()

    def v(self, node: str) -> Array:
        """Voltage series at a node (zeros for the reference node)."""
        if node in self.node_voltages:
            return self.node_voltages[node]
        if node in GROUND_NAMES or node in self.ground_aliases:
            return jnp.zeros_like(self.time)
        raise KeyError(f"Unknown node: {node}")

    def i(self, component_id: str) -> Array:
        """Branch current series of a component."""
        return self.component_currents[component_id]
