"""
JIT-compiled transient simulator using MNA with backward-Euler companion models.

Structure:
1. compile_netlist(): pre-computes stamp index patterns for every component
   (ground entries are routed to a sink slot that is dropped after scatter)
2. assemble(): zeroes and restamps G and b for one time point
3. solve_dense(): Gaussian elimination with partial pivoting
4. advance(): records node voltages, updates reactive state and derives
   per-component and per-node currents

Reactive state (capacitor voltages, inductor currents) lives in SimState and is
threaded explicitly through each step; nothing is kept between runs.
"""

from __future__ import annotations
import logging
import time
from typing import NamedTuple, Callable, Sequence, Mapping, Any

import jax
import jax.numpy as jnp
from jax import Array

from ..components import Component, ac_parameters, parse_netlist
from ..constants import MIN_RESISTANCE, WIRE_RESISTANCE
from ..errors import SingularMatrixError
from ..linalg import solve_dense
from ..topology import Topology, build_topology
from .config import SimulationConfig, DEFAULT_SIM_CONFIG, as_config
from .results import SimulationResult, SimulationMetrics

logger = logging.getLogger(__name__)


class SimState(NamedTuple):
    """
    Immutable simulation state (JAX pytree).
    """
    time: Array            # scalar, time of the last solved step
    cap_voltages: Array    # (n_caps,) terminal voltage from the previous step
    ind_currents: Array    # (n_inds,) branch current from the previous step


class StepOutput(NamedTuple):
    """Quantities recorded for one step."""
    node_voltages: Array       # (n_nodes,)
    component_currents: Array  # (n_components,) in topology order
    node_currents: Array       # (n_nodes,)


class SourceTable(NamedTuple):
    """Waveform parameters of a group of sources, one entry per source."""
    is_ac: Array
    dc: Array
    amplitude: Array
    frequency: Array
    phase: Array
    offset: Array


class CompiledNetlist(NamedTuple):
    """
    Pre-computed data structures for fast stepping.
    All indices and patterns computed at compile time.
    """
    topology: Topology
    n_nodes: int
    n_total: int
    n_components: int
    dt: float

    # Resistors and wires: 4 conductance entries each
    r_g_idx: Array          # (n_r, 4) flat indices into G
    r_g_signs: Array        # (n_r, 4)
    r_resistance: Array     # (n_r,) floored resistance
    r_node_a: Array         # (n_r,) voltage lookup index (ground -> n_nodes)
    r_node_b: Array
    r_comp_idx: Array       # (n_r,) position in topology.components

    # Capacitors (backward-Euler companion: Ceq = C/dt plus history current)
    c_g_idx: Array          # (n_c, 4)
    c_g_signs: Array
    c_b_idx: Array          # (n_c, 2) flat indices into b
    c_b_signs: Array        # (n_c, 2)
    c_capacitance: Array    # (n_c,)
    c_node_a: Array
    c_node_b: Array
    c_comp_idx: Array

    # Inductors (branch current unknown, diagonal -L/dt)
    l_g_idx: Array          # (n_l, 4) coupling entries
    l_g_signs: Array
    l_diag_idx: Array       # (n_l,)
    l_mna_idx: Array        # (n_l,) row of the branch current
    l_inductance: Array
    l_comp_idx: Array

    # Voltage sources (branch current unknown)
    vs_g_idx: Array         # (n_vs, 4)
    vs_g_signs: Array
    vs_mna_idx: Array       # (n_vs,)
    vs_table: SourceTable
    vs_comp_idx: Array

    # Current sources (RHS only)
    cs_b_idx: Array         # (n_cs, 2)
    cs_b_signs: Array
    cs_table: SourceTable
    cs_comp_idx: Array

    # KCL bookkeeping: node_currents = incidence @ component_currents
    incidence: Array        # (n_nodes, n_components)


class TransientFns(NamedTuple):
    """Collection of pure per-step functions for one compiled netlist."""
    init: Callable[[], SimState]
    assemble: Callable[[SimState, float], tuple[Array, Array]]
    solve: Callable[[Array, Array], Array]
    advance: Callable[[SimState, Array, float], tuple[SimState, StepOutput]]
    step: Callable[[SimState, float], tuple[SimState, StepOutput]]
    dt: float
    compiled: CompiledNetlist


def _conductance_pattern(n_total: int, ia: int, ib: int) -> tuple[list[int], list[float]]:
    """
    Flat indices and signs for a two-terminal conductance stamp.

    G[ia, ia] += g
    G[ib, ib] += g
    G[ia, ib] -= g
    G[ib, ia] -= g

    Entries touching ground (index -1) go to the sink slot n_total**2.
    """
    sink = n_total * n_total

    def flat(r: int, c: int) -> int:
        return r * n_total + c if r >= 0 and c >= 0 else sink

    return [flat(ia, ia), flat(ib, ib), flat(ia, ib), flat(ib, ia)], [1.0, 1.0, -1.0, -1.0]


def _injection_pattern(n_total: int, ia: int, ib: int) -> tuple[list[int], list[float]]:
    """b indices and signs for a current injected into ia and drawn from ib."""
    sink = n_total
    return [ia if ia >= 0 else sink, ib if ib >= 0 else sink], [1.0, -1.0]


def _branch_pattern(n_total: int, ia: int, ib: int, row: int) -> tuple[list[int], list[float]]:
    """
    Coupling entries between a branch-current unknown and its terminals.

    G[ia, row] = G[row, ia] = +1
    G[ib, row] = G[row, ib] = -1
    """
    sink = n_total * n_total
    indices = [
        ia * n_total + row if ia >= 0 else sink,
        row * n_total + ia if ia >= 0 else sink,
        ib * n_total + row if ib >= 0 else sink,
        row * n_total + ib if ib >= 0 else sink,
    ]
    return indices, [1.0, 1.0, -1.0, -1.0]


def _int_table(rows: list, width: int | None = None) -> Array:
    shape = (len(rows),) if width is None else (len(rows), width)
    return jnp.array(rows, dtype=jnp.int32).reshape(shape)


def _float_table(rows: list, width: int | None = None) -> Array:
    shape = (len(rows),) if width is None else (len(rows), width)
    return jnp.array(rows, dtype=float).reshape(shape)


def _source_table(sources: Sequence[Component]) -> SourceTable:
    is_ac, dc, amp, freq, phase, offset = [], [], [], [], [], []
    for src in sources:
        a, f, p, o = ac_parameters(src)
        is_ac.append(src.waveform == "ac")
        dc.append(float(src.value))
        amp.append(a)
        freq.append(f)
        phase.append(p)
        offset.append(o)
    return SourceTable(
        is_ac=jnp.array(is_ac, dtype=bool).reshape((len(sources),)),
        dc=_float_table(dc),
        amplitude=_float_table(amp),
        frequency=_float_table(freq),
        phase=_float_table(phase),
        offset=_float_table(offset),
    )


def _source_values(table: SourceTable, t) -> Array:
    """Evaluate every source of a table at time t."""
    ac = table.offset + table.amplitude * jnp.sin(2.0 * jnp.pi * table.frequency * t + table.phase)
    return jnp.where(table.is_ac, ac, table.dc)


def compile_netlist(netlist: Sequence | Topology, dt: float) -> TransientFns:
    """
    Compile a netlist into per-step simulation functions.

    Args:
        netlist: Component list (or an already built Topology)
        dt: Timestep in seconds (used as given; simulate() applies the floor)

    Returns:
        TransientFns with init, assemble, solve, advance and step functions
    """
    topo = netlist if isinstance(netlist, Topology) else build_topology(netlist)

    n_nodes = topo.num_nodes
    n_total = topo.dimension
    n_components = len(topo.components)
    unknowns = topo.unknown_names()

    vs_offset = n_nodes
    ind_offset = n_nodes + len(topo.voltage_sources)

    def lookup(node: str) -> int:
        """Voltage lookup index; ground maps to the appended zero."""
        idx = topo.index(node)
        return idx if idx >= 0 else n_nodes

    r = dict(g_idx=[], g_signs=[], res=[], a=[], b=[], comp=[])
    c = dict(g_idx=[], g_signs=[], b_idx=[], b_signs=[], cap=[], a=[], b=[], comp=[])
    l = dict(g_idx=[], g_signs=[], diag=[], mna=[], ind=[], comp=[])
    vs = dict(g_idx=[], g_signs=[], mna=[], comp=[], specs=[])
    cs = dict(b_idx=[], b_signs=[], comp=[], specs=[])
    incidence = [[0.0] * n_components for _ in range(n_nodes)]

    for pos, comp in enumerate(topo.components):
        ia, ib = topo.index(comp.from_node), topo.index(comp.to_node)
        kind = comp.kind

        if kind in ("resistor", "wire"):
            idx, signs = _conductance_pattern(n_total, ia, ib)
            r["g_idx"].append(idx)
            r["g_signs"].append(signs)
            r["res"].append(WIRE_RESISTANCE if kind == "wire" else max(comp.value, MIN_RESISTANCE))
            r["a"].append(lookup(comp.from_node))
            r["b"].append(lookup(comp.to_node))
            r["comp"].append(pos)
        elif kind == "capacitor":
            idx, signs = _conductance_pattern(n_total, ia, ib)
            b_idx, b_signs = _injection_pattern(n_total, ia, ib)
            c["g_idx"].append(idx)
            c["g_signs"].append(signs)
            c["b_idx"].append(b_idx)
            c["b_signs"].append(b_signs)
            c["cap"].append(float(comp.value))
            c["a"].append(lookup(comp.from_node))
            c["b"].append(lookup(comp.to_node))
            c["comp"].append(pos)
        elif kind == "inductor":
            row = ind_offset + len(l["mna"])
            idx, signs = _branch_pattern(n_total, ia, ib, row)
            l["g_idx"].append(idx)
            l["g_signs"].append(signs)
            l["diag"].append(row * n_total + row)
            l["mna"].append(row)
            l["ind"].append(float(comp.value))
            l["comp"].append(pos)
        elif kind == "voltage-source":
            row = vs_offset + len(vs["mna"])
            idx, signs = _branch_pattern(n_total, ia, ib, row)
            vs["g_idx"].append(idx)
            vs["g_signs"].append(signs)
            vs["mna"].append(row)
            vs["comp"].append(pos)
            vs["specs"].append(comp)
        elif kind == "current-source":
            b_idx, b_signs = _injection_pattern(n_total, ia, ib)
            cs["b_idx"].append(b_idx)
            cs["b_signs"].append(b_signs)
            cs["comp"].append(pos)
            cs["specs"].append(comp)

        # A current source pushes its value into from_node, so the current
        # leaving from_node through it is the negated excitation.
        sign = -1.0 if kind == "current-source" else 1.0
        if ia >= 0:
            incidence[ia][pos] += sign
        if ib >= 0:
            incidence[ib][pos] -= sign

    cn = CompiledNetlist(
        topology=topo,
        n_nodes=n_nodes,
        n_total=n_total,
        n_components=n_components,
        dt=dt,

        r_g_idx=_int_table(r["g_idx"], 4),
        r_g_signs=_float_table(r["g_signs"], 4),
        r_resistance=_float_table(r["res"]),
        r_node_a=_int_table(r["a"]),
        r_node_b=_int_table(r["b"]),
        r_comp_idx=_int_table(r["comp"]),

        c_g_idx=_int_table(c["g_idx"], 4),
        c_g_signs=_float_table(c["g_signs"], 4),
        c_b_idx=_int_table(c["b_idx"], 2),
        c_b_signs=_float_table(c["b_signs"], 2),
        c_capacitance=_float_table(c["cap"]),
        c_node_a=_int_table(c["a"]),
        c_node_b=_int_table(c["b"]),
        c_comp_idx=_int_table(c["comp"]),

        l_g_idx=_int_table(l["g_idx"], 4),
        l_g_signs=_float_table(l["g_signs"], 4),
        l_diag_idx=_int_table(l["diag"]),
        l_mna_idx=_int_table(l["mna"]),
        l_inductance=_float_table(l["ind"]),
        l_comp_idx=_int_table(l["comp"]),

        vs_g_idx=_int_table(vs["g_idx"], 4),
        vs_g_signs=_float_table(vs["g_signs"], 4),
        vs_mna_idx=_int_table(vs["mna"]),
        vs_table=_source_table(vs["specs"]),
        vs_comp_idx=_int_table(vs["comp"]),

        cs_b_idx=_int_table(cs["b_idx"], 2),
        cs_b_signs=_float_table(cs["b_signs"], 2),
        cs_table=_source_table(cs["specs"]),
        cs_comp_idx=_int_table(cs["comp"]),

        incidence=_float_table(incidence, n_components),
    )
    logger.debug(
        "Compiled netlist: %d nodes, %d unknowns, %d components, dt=%g",
        n_nodes, n_total, n_components, dt,
    )

    def init() -> SimState:
        """Create the all-zero initial state."""
        return SimState(
            time=jnp.array(0.0),
            cap_voltages=jnp.zeros(len(c["cap"])),
            ind_currents=jnp.zeros(len(l["ind"])),
        )

    @jax.jit
    def assemble(state: SimState, t) -> tuple[Array, Array]:
        """Zero and restamp G and b for time t."""
        G_flat = jnp.zeros(n_total * n_total + 1)
        b = jnp.zeros(n_total + 1)

        # --- Resistors and wires ---
        conductances = 1.0 / cn.r_resistance
        G_flat = G_flat.at[cn.r_g_idx].add(conductances[:, None] * cn.r_g_signs)

        # --- Capacitors (backward-Euler companion) ---
        ceq = cn.c_capacitance / cn.dt
        G_flat = G_flat.at[cn.c_g_idx].add(ceq[:, None] * cn.c_g_signs)
        history = ceq * state.cap_voltages
        b = b.at[cn.c_b_idx].add(history[:, None] * cn.c_b_signs)

        # --- Inductors ---
        coeff = -(cn.l_inductance / cn.dt)
        G_flat = G_flat.at[cn.l_g_idx].add(cn.l_g_signs)
        G_flat = G_flat.at[cn.l_diag_idx].add(coeff)
        b = b.at[cn.l_mna_idx].add(coeff * state.ind_currents)

        # --- Voltage sources ---
        G_flat = G_flat.at[cn.vs_g_idx].add(cn.vs_g_signs)
        b = b.at[cn.vs_mna_idx].add(_source_values(cn.vs_table, t))

        # --- Current sources ---
        injected = _source_values(cn.cs_table, t)
        b = b.at[cn.cs_b_idx].add(injected[:, None] * cn.cs_b_signs)

        # Drop the ground sink slots
        G = G_flat[:-1].reshape((n_total, n_total))
        return G, b[:-1]

    def solve(G: Array, b: Array) -> Array:
        return solve_dense(G, b, unknowns)

    @jax.jit
    def advance(state: SimState, x: Array, t) -> tuple[SimState, StepOutput]:
        """Record a solved step and roll the reactive state forward."""
        v = jnp.concatenate([x[:n_nodes], jnp.zeros(1)])

        i_r = (v[cn.r_node_a] - v[cn.r_node_b]) / cn.r_resistance

        cap_voltages = v[cn.c_node_a] - v[cn.c_node_b]
        i_c = cn.c_capacitance * (cap_voltages - state.cap_voltages) / cn.dt

        i_l = x[cn.l_mna_idx]
        i_vs = x[cn.vs_mna_idx]
        i_cs = _source_values(cn.cs_table, t)

        currents = jnp.zeros(n_components)
        currents = currents.at[cn.r_comp_idx].set(i_r)
        currents = currents.at[cn.c_comp_idx].set(i_c)
        currents = currents.at[cn.l_comp_idx].set(i_l)
        currents = currents.at[cn.vs_comp_idx].set(i_vs)
        currents = currents.at[cn.cs_comp_idx].set(i_cs)

        new_state = SimState(
            time=jnp.asarray(t, dtype=state.time.dtype),
            cap_voltages=cap_voltages,
            ind_currents=i_l,
        )
        output = StepOutput(
            node_voltages=v[:n_nodes],
            component_currents=currents,
            node_currents=cn.incidence @ currents,
        )
        return new_state, output

    def step(state: SimState, t: float) -> tuple[SimState, StepOutput]:
        """
        Advance one step to time t.

        Raises:
            SingularMatrixError: if the assembled system has no unique solution
        """
        G, b = assemble(state, t)
        x = solve(G, b)
        return advance(state, x, t)

    return TransientFns(
        init=init,
        assemble=assemble,
        solve=solve,
        advance=advance,
        step=step,
        dt=dt,
        compiled=cn,
    )


def _empty_result(config: SimulationConfig) -> SimulationResult:
    steps = config.steps
    return SimulationResult(
        time=jnp.arange(steps) * config.step_size,
        node_voltages={},
        node_currents={},
        component_currents={},
        metrics=SimulationMetrics(
            steps=steps, assembly_ms=0.0, solve_ms=0.0, matrix_size=0, component_count=0
        ),
    )


def simulate(
    components: Sequence,
    config: SimulationConfig | Mapping[str, Any] = DEFAULT_SIM_CONFIG,
) -> SimulationResult:
    """
    Run a fixed-step transient analysis.

    Args:
        components: Component records or editor dicts
        config: SimulationConfig or a {"dt", "duration"} mapping

    Returns:
        SimulationResult with one sample per step at t = k * dt

    Raises:
        ConfigurationError: if the netlist has components but no ground binding
        SingularMatrixError: if any step's system is singular (aborts the run),
            or if every component connects ground to ground

    An empty netlist is not an error even though it has no ground: it yields
    a full time axis with empty series maps and zeroed metrics, the editor's
    "no circuit yet" state.
    """
    config = as_config(config)
    dt = config.step_size
    steps = config.steps

    netlist = parse_netlist(components)
    if not netlist:
        logger.warning("simulate() called with an empty netlist; returning an empty result")
        return _empty_result(config)

    topo = build_topology(netlist)
    if topo.dimension == 0:
        if topo.components:
            raise SingularMatrixError(
                "Circuit matrix is empty: every component connects ground to ground", column=0
            )
        logger.warning("Netlist has no nodes besides ground; returning an empty result")
        return _empty_result(config)

    sim = compile_netlist(topo, dt)

    state = sim.init()
    outputs: list[StepOutput] = []
    assembly_s = 0.0
    solve_s = 0.0

    for k in range(steps):
        t = k * dt

        start = time.perf_counter()
        G, b = sim.assemble(state, t)
        G.block_until_ready()
        assembly_s += time.perf_counter() - start

        start = time.perf_counter()
        x = sim.solve(G, b)
        solve_s += time.perf_counter() - start

        state, output = sim.advance(state, x, t)
        outputs.append(output)

    voltages = jnp.stack([o.node_voltages for o in outputs])
    node_currents = jnp.stack([o.node_currents for o in outputs])
    comp_currents = jnp.stack([o.component_currents for o in outputs])

    metrics = SimulationMetrics(
        steps=steps,
        assembly_ms=round(assembly_s * 1e3, 3),
        solve_ms=round(solve_s * 1e3, 3),
        matrix_size=topo.dimension,
        component_count=len(topo.components),
    )
    logger.info(
        "Transient run: %d steps, matrix %dx%d, %d components (assembly %.3f ms, solve %.3f ms)",
        steps, topo.dimension, topo.dimension, len(topo.components),
        metrics.assembly_ms, metrics.solve_ms,
    )

    return SimulationResult(
        time=jnp.arange(steps) * dt,
        node_voltages={node: voltages[:, i] for i, node in enumerate(topo.nodes)},
        node_currents={node: node_currents[:, i] for i, node in enumerate(topo.nodes)},
        component_currents={
            comp.id: comp_currents[:, i] for i, comp in enumerate(topo.components)
        },
        metrics=metrics,
        ground_aliases=topo.ground_aliases,
    )
