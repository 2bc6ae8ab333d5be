"""SymPy coefficient algebra with a solve-scoped simplification cache."""

from __future__ import annotations

import sympy
from sympy import Expr

from ..linalg import Field

ZERO = sympy.S.Zero
ONE = sympy.S.One


class SymbolicAlgebra:
    """
    add/sub/mul/div on SymPy expressions, each result brought to canonical
    rational form (numerator/denominator with common factors cancelled).

    Structurally identical subexpressions recur many times during elimination,
    so every simplification is memoised. One instance belongs to one solve
    call; create a new one (or call reset()) per call.
    """

    def __init__(self):
        self._cache: dict[Expr, Expr] = {}
        self.hits = 0

    def reset(self) -> None:
        self._cache.clear()
        self.hits = 0

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def normalize(self, expr) -> Expr:
        expr = sympy.sympify(expr)
        if expr == ZERO:
            return ZERO
        cached = self._cache.get(expr)
        if cached is not None:
            self.hits += 1
            return cached
        simplified = sympy.cancel(expr)
        self._cache[expr] = simplified
        self._cache.setdefault(simplified, simplified)
        return simplified

    def add(self, a: Expr, b: Expr) -> Expr:
        if a == ZERO:
            return b
        if b == ZERO:
            return a
        return self.normalize(a + b)

    def sub(self, a: Expr, b: Expr) -> Expr:
        if b == ZERO:
            return a
        if a == ZERO:
            return self.normalize(-b)
        return self.normalize(a - b)

    def mul(self, a: Expr, b: Expr) -> Expr:
        if a == ZERO or b == ZERO:
            return ZERO
        if a == ONE:
            return b
        if b == ONE:
            return a
        return self.normalize(a * b)

    def div(self, a: Expr, b: Expr) -> Expr:
        if a == ZERO:
            return ZERO
        return self.normalize(a / b)

    def is_zero(self, expr: Expr) -> bool:
        """True when the expression simplifies to the literal 0."""
        return self.normalize(expr) == ZERO

    def magnitude(self, expr: Expr) -> float:
        # No ordering on symbolic values: any non-zero entry is a valid pivot
        return 0.0 if self.is_zero(expr) else 1.0

    def as_field(self) -> Field:
        return Field(
            zero=ZERO,
            add=self.add,
            sub=self.sub,
            mul=self.mul,
            div=self.div,
            is_zero=self.is_zero,
            magnitude=self.magnitude,
        )
