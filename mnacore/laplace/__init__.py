"""mnacore Laplace-Domain (Symbolic) Analysis Module.

This module solves the MNA system once with SymPy expressions in the
Laplace variable s, giving closed-form node voltages and branch currents.

Admittances:
    - R: 1/R (wires: 1/1e-6)
    - C: s*C
    - L: 1/(s*L), through a branch-current row
"""

from .algebra import SymbolicAlgebra
from .solver import (
    SymbolicNode,
    SymbolicResult,
    evaluate,
    parameter_symbol,
    s,
    solve_symbolic,
)

__all__ = [
    "SymbolicAlgebra",
    "SymbolicNode",
    "SymbolicResult",
    "evaluate",
    "parameter_symbol",
    "s",
    "solve_symbolic",
]
