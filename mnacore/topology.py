"""Netlist normalisation: ground binding, node ordering and kind grouping."""

from __future__ import annotations
import logging
from typing import NamedTuple, Iterable, Sequence

from .components import Component, parse_netlist
from .constants import CANONICAL_GROUND, GROUND_NAMES
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Topology(NamedTuple):
    """
    Active (non-ground) netlist with a fixed unknown ordering.

    MNA unknown vector layout:
        [node voltages (sorted node names)]
        [voltage source branch currents (netlist order)]
        [inductor branch currents (netlist order)]
    """
    components: tuple[Component, ...]
    nodes: tuple[str, ...]  # sorted, ground excluded
    node_index: dict[str, int]
    ground: str = CANONICAL_GROUND
    ground_aliases: frozenset[str] = frozenset()  # user-bound ground names

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    def of_kind(self, *kinds: str) -> tuple[Component, ...]:
        return tuple(c for c in self.components if c.kind in kinds)

    @property
    def resistive(self) -> tuple[Component, ...]:
        """Resistors and wires, both stamped as plain conductances."""
        return self.of_kind("resistor", "wire")

    @property
    def capacitors(self) -> tuple[Component, ...]:
        return self.of_kind("capacitor")

    @property
    def inductors(self) -> tuple[Component, ...]:
        return self.of_kind("inductor")

    @property
    def voltage_sources(self) -> tuple[Component, ...]:
        return self.of_kind("voltage-source")

    @property
    def current_sources(self) -> tuple[Component, ...]:
        return self.of_kind("current-source")

    @property
    def dimension(self) -> int:
        """Size of the MNA system."""
        return self.num_nodes + len(self.voltage_sources) + len(self.inductors)

    def index(self, node: str) -> int:
        """Matrix row of a node, -1 for the reference node."""
        if node == self.ground or node in GROUND_NAMES or node in self.ground_aliases:
            return -1
        return self.node_index.get(node, -1)

    def unknown_names(self) -> tuple[str, ...]:
        """Human-readable label for every unknown, in matrix order."""
        names = [f"V({node})" for node in self.nodes]
        names += [f"I({c.id})" for c in self.voltage_sources]
        names += [f"I({c.id})" for c in self.inductors]
        return tuple(names)


def extract_nodes(components: Iterable[Component]) -> list[str]:
    """Sorted unique node names referenced by a netlist (ground included)."""
    found = set()
    for comp in components:
        if comp.from_node:
            found.add(comp.from_node)
        if comp.to_node:
            found.add(comp.to_node)
    return sorted(found)


def build_topology(components: Sequence, ground: str = CANONICAL_GROUND) -> Topology:
    """
    Resolve ground bindings and assign matrix indices.

    Args:
        components: Component records or editor dicts (None entries dropped)
        ground: Canonical name of the reference node

    Returns:
        Topology with ground components stripped and every ground alias
        rewritten to ``ground``

    Raises:
        ConfigurationError: if no ground component is present
    """
    netlist = parse_netlist(components)

    bindings = set()
    for comp in netlist:
        if comp.kind == "ground":
            if comp.from_node:
                bindings.add(comp.from_node)
            if comp.to_node:
                bindings.add(comp.to_node)

    if not bindings:
        raise ConfigurationError(
            "Circuit requires at least one ground reference. Add a ground component."
        )

    def normalize(node: str) -> str:
        if node == ground or node in GROUND_NAMES or node in bindings:
            return ground
        return node

    active = tuple(
        comp._replace(from_node=normalize(comp.from_node), to_node=normalize(comp.to_node))
        for comp in netlist
        if comp.kind != "ground"
    )

    node_set = set()
    for comp in active:
        node_set.add(comp.from_node)
        node_set.add(comp.to_node)
    node_set.discard(ground)

    nodes = tuple(sorted(node_set))
    node_index = {name: idx for idx, name in enumerate(nodes)}

    topo = Topology(
        components=active,
        nodes=nodes,
        node_index=node_index,
        ground=ground,
        ground_aliases=frozenset(bindings),
    )
    logger.debug(
        "Topology: %d active components, %d nodes, dimension %d (ground aliases: %s)",
        len(active), len(nodes), topo.dimension, sorted(bindings),
    )
    return topo
