"""Symbolic MNA solver in the Laplace domain.

The network is stamped once with symbolic admittances:
    Y_R = 1/R        (wire: 1/1e-6)
    Y_C = s*C
    Y_L = 1/(s*L)    (stamped through its branch row: V_a - V_b - s*L*I_L = 0)

and solved by Gaussian elimination over SymPy expressions. Sources are
constants (DC level, or offset + amplitude for AC); frequency and phase have
no meaning in the s-domain and are dropped.
"""

from __future__ import annotations
import logging
from typing import NamedTuple, Sequence

import sympy
from sympy import Expr, Symbol

from ..components import Component, ac_parameters
from ..constants import MIN_RESISTANCE, WIRE_RESISTANCE
from ..errors import SingularMatrixError
from ..linalg import gaussian_solve
from ..topology import build_topology
from .algebra import SymbolicAlgebra, ZERO, ONE

logger = logging.getLogger(__name__)

s = Symbol("s")

_PREFIX = {
    "resistor": "R",
    "capacitor": "C",
    "inductor": "L",
    "voltage-source": "V",
    "current-source": "I",
}


class SymbolicNode(NamedTuple):
    """Closed-form voltage and net current of one node."""
    voltage: Expr
    voltage_latex: str
    current: Expr
    current_latex: str


class SymbolicResult(NamedTuple):
    """
    Laplace-domain solution of a netlist.

    node_voltages: per-node voltage/current expressions (ground excluded)
    branch_currents: voltage source and inductor branch unknowns
    component_currents: from_node -> to_node current of every component
    variables: node names in matrix order
    parameters: concrete value of each component symbol (empty when the
        netlist was solved with numeric values)
    """
    node_voltages: dict[str, SymbolicNode]
    branch_currents: dict[str, Expr]
    component_currents: dict[str, Expr]
    variables: tuple[str, ...]
    parameters: dict[Symbol, float]
    s: Symbol = s

    def latex(self, expr: Expr) -> str:
        return sympy.latex(expr)


def parameter_symbol(comp: Component) -> Symbol:
    """Symbol for a component value, e.g. R_r1 for resistor "r1"."""
    return Symbol(f"{_PREFIX[comp.kind]}_{comp.id}")


def _constant(value: float) -> Expr:
    return sympy.nsimplify(float(value), rational=True)


def _source_level(comp: Component) -> float:
    if comp.waveform == "ac":
        amplitude, _, _, offset = ac_parameters(comp)
        return offset + amplitude
    return float(comp.value)


def solve_symbolic(components: Sequence, *, symbolic_values: bool = True) -> SymbolicResult:
    """
    Solve a netlist symbolically.

    Args:
        components: Component records or editor dicts
        symbolic_values: If True every component value is a symbol (see
            parameter_symbol) and the numbers go to result.parameters.
            If False the values are inlined as exact rationals.

    Returns:
        SymbolicResult

    Raises:
        ConfigurationError: if there is no ground binding
        SingularMatrixError: if the symbolic system has no unique solution
    """
    algebra = SymbolicAlgebra()
    field = algebra.as_field()

    topo = build_topology(components)
    parameters: dict[Symbol, float] = {}

    def value_of(comp: Component, value: float) -> Expr:
        if not symbolic_values:
            return _constant(value)
        sym = parameter_symbol(comp)
        parameters[sym] = float(value)
        return sym

    def admittance(comp: Component) -> Expr:
        if comp.kind == "wire":
            return _constant(1.0 / WIRE_RESISTANCE)
        if comp.kind == "resistor":
            return algebra.div(ONE, value_of(comp, max(comp.value, MIN_RESISTANCE)))
        if comp.kind == "capacitor":
            return algebra.mul(s, value_of(comp, comp.value))
        return ZERO

    n = topo.dimension
    if n == 0:
        if topo.components:
            raise SingularMatrixError(
                "Circuit matrix is empty: every component connects ground to ground", column=0
            )
        return SymbolicResult({}, {}, {}, (), {})

    matrix = [[ZERO] * n for _ in range(n)]
    rhs = [ZERO] * n

    def stamp_admittance(ia: int, ib: int, y: Expr) -> None:
        if ia >= 0:
            matrix[ia][ia] = algebra.add(matrix[ia][ia], y)
            if ib >= 0:
                matrix[ia][ib] = algebra.sub(matrix[ia][ib], y)
        if ib >= 0:
            matrix[ib][ib] = algebra.add(matrix[ib][ib], y)
            if ia >= 0:
                matrix[ib][ia] = algebra.sub(matrix[ib][ia], y)

    def stamp_branch(ia: int, ib: int, row: int) -> None:
        if ia >= 0:
            matrix[ia][row] = algebra.add(matrix[ia][row], ONE)
            matrix[row][ia] = algebra.add(matrix[row][ia], ONE)
        if ib >= 0:
            matrix[ib][row] = algebra.sub(matrix[ib][row], ONE)
            matrix[row][ib] = algebra.sub(matrix[row][ib], ONE)

    def stamp_injection(ia: int, ib: int, value: Expr) -> None:
        if ia >= 0:
            rhs[ia] = algebra.add(rhs[ia], value)
        if ib >= 0:
            rhs[ib] = algebra.sub(rhs[ib], value)

    admittances: dict[int, Expr] = {}
    excitations: dict[int, Expr] = {}
    rows: dict[int, int] = {}
    vs_count = 0
    ind_count = 0
    ind_offset = topo.num_nodes + len(topo.voltage_sources)

    for pos, comp in enumerate(topo.components):
        ia, ib = topo.index(comp.from_node), topo.index(comp.to_node)
        kind = comp.kind

        if kind in ("resistor", "wire", "capacitor"):
            y = admittance(comp)
            admittances[pos] = y
            stamp_admittance(ia, ib, y)
        elif kind == "inductor":
            row = ind_offset + ind_count
            ind_count += 1
            rows[pos] = row
            stamp_branch(ia, ib, row)
            impedance = algebra.mul(value_of(comp, comp.value), s)
            matrix[row][row] = algebra.sub(matrix[row][row], impedance)
        elif kind == "voltage-source":
            row = topo.num_nodes + vs_count
            vs_count += 1
            rows[pos] = row
            stamp_branch(ia, ib, row)
            level = value_of(comp, _source_level(comp))
            excitations[pos] = level
            rhs[row] = algebra.add(rhs[row], level)
        elif kind == "current-source":
            level = value_of(comp, _source_level(comp))
            excitations[pos] = level
            stamp_injection(ia, ib, level)

    solution = gaussian_solve(matrix, rhs, field, unknowns=topo.unknown_names())
    solution = [algebra.normalize(expr) for expr in solution]

    def voltage(node: str) -> Expr:
        idx = topo.index(node)
        return ZERO if idx < 0 else solution[idx]

    branch_currents: dict[str, Expr] = {}
    component_currents: dict[str, Expr] = {}
    net = [ZERO] * topo.num_nodes

    for pos, comp in enumerate(topo.components):
        kind = comp.kind
        if kind in ("voltage-source", "inductor"):
            current = solution[rows[pos]]
            branch_currents[comp.id] = current
        elif kind == "current-source":
            current = excitations[pos]
        else:
            current = algebra.mul(
                admittances[pos], algebra.sub(voltage(comp.from_node), voltage(comp.to_node))
            )
        component_currents[comp.id] = current

        # Current sources push their value into from_node
        leaving = algebra.mul(-ONE, current) if kind == "current-source" else current
        ia, ib = topo.index(comp.from_node), topo.index(comp.to_node)
        if ia >= 0:
            net[ia] = algebra.add(net[ia], leaving)
        if ib >= 0:
            net[ib] = algebra.sub(net[ib], leaving)

    node_results = {
        node: SymbolicNode(
            voltage=solution[i],
            voltage_latex=sympy.latex(solution[i]),
            current=net[i],
            current_latex=sympy.latex(net[i]),
        )
        for i, node in enumerate(topo.nodes)
    }

    logger.debug(
        "Symbolic solve: dimension %d, %d cached simplifications, %d cache hits",
        n, algebra.cache_size, algebra.hits,
    )

    return SymbolicResult(
        node_voltages=node_results,
        branch_currents=branch_currents,
        component_currents=component_currents,
        variables=topo.nodes,
        parameters=parameters,
    )


def evaluate(result: SymbolicResult, expr: Expr, s_value: complex = 0) -> complex | float:
    """
    Substitute the component values and s = s_value into an expression.

    Where direct substitution is undefined (e.g. a removable 0/0 at s = 0),
    the limit s -> s_value is taken instead.
    """
    expr = sympy.sympify(expr).subs(result.parameters)
    value = expr.subs(result.s, s_value)
    if value.has(sympy.zoo, sympy.nan, sympy.oo, -sympy.oo):
        value = sympy.limit(expr, result.s, s_value)
    number = complex(sympy.N(value))
    return number.real if number.imag == 0 else number
