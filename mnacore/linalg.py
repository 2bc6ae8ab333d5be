"""
Gaussian elimination with partial pivoting.

Two entry points share one elimination shape and one failure path
(SingularMatrixError when a pivot column has no usable entry):

    gaussian_solve(A, b, field)  -- generic over a coefficient Field
                                    (floats, SymPy expressions, ...)
    solve_dense(A, b)            -- JIT-compiled JAX kernel for dense
                                    float systems, used per transient step
"""

from __future__ import annotations
import operator
from typing import NamedTuple, Callable, Any, Sequence

import jax
import jax.numpy as jnp
from jax import Array, lax

from .constants import PIVOT_TOLERANCE
from .errors import SingularMatrixError


class Field(NamedTuple):
    """Coefficient algebra used by gaussian_solve."""
    zero: Any
    add: Callable[[Any, Any], Any]
    sub: Callable[[Any, Any], Any]
    mul: Callable[[Any, Any], Any]
    div: Callable[[Any, Any], Any]
    is_zero: Callable[[Any], bool]
    magnitude: Callable[[Any], float]  # pivot ranking key


FLOAT_FIELD = Field(
    zero=0.0,
    add=operator.add,
    sub=operator.sub,
    mul=operator.mul,
    div=operator.truediv,
    is_zero=lambda x: abs(x) < PIVOT_TOLERANCE,
    magnitude=abs,
)


def gaussian_solve(
    A: Sequence[Sequence[Any]],
    b: Sequence[Any],
    field: Field = FLOAT_FIELD,
    unknowns: Sequence[str] | None = None,
) -> list[Any]:
    """
    Solve A x = b.

    Args:
        A: Square coefficient matrix (row-major, not modified)
        b: Right-hand side
        field: Coefficient algebra
        unknowns: Optional labels used in the singular-matrix report

    Raises:
        SingularMatrixError: if some column has no usable pivot
    """
    n = len(b)
    A = [list(row) for row in A]
    b = list(b)

    for k in range(n):
        # First row with the largest magnitude wins ties
        pivot_row = max(range(k, n), key=lambda r: field.magnitude(A[r][k]))
        if field.is_zero(A[pivot_row][k]):
            raise SingularMatrixError(
                f"Circuit matrix is singular: no usable pivot in column {k}",
                column=k,
                unknown=unknowns[k] if unknowns else None,
            )
        if pivot_row != k:
            A[k], A[pivot_row] = A[pivot_row], A[k]
            b[k], b[pivot_row] = b[pivot_row], b[k]

        for i in range(k + 1, n):
            if field.is_zero(A[i][k]):
                continue
            factor = field.div(A[i][k], A[k][k])
            for j in range(k, n):
                A[i][j] = field.sub(A[i][j], field.mul(factor, A[k][j]))
            b[i] = field.sub(b[i], field.mul(factor, b[k]))

    x = [field.zero] * n
    for i in range(n - 1, -1, -1):
        total = b[i]
        for j in range(i + 1, n):
            if not field.is_zero(A[i][j]):
                total = field.sub(total, field.mul(A[i][j], x[j]))
        x[i] = field.div(total, A[i][i])
    return x


@jax.jit
def _eliminate(A: Array, b: Array) -> tuple[Array, Array, Array]:
    """
    Forward elimination + back substitution.

    Returns (x, smallest_pivot_magnitude, column_of_smallest_pivot).
    The caller decides whether the system was singular.
    """
    n = b.shape[0]
    rows = jnp.arange(n)

    def forward(k, carry):
        A, b, smallest, worst = carry
        column = jnp.where(rows >= k, jnp.abs(A[:, k]), -1.0)
        p = jnp.argmax(column)
        magnitude = column[p]

        # Swap rows k and p
        row_k, row_p = A[k], A[p]
        A = A.at[k].set(row_p).at[p].set(row_k)
        b_k, b_p = b[k], b[p]
        b = b.at[k].set(b_p).at[p].set(b_k)

        pivot = jnp.where(magnitude < PIVOT_TOLERANCE, 1.0, A[k, k])
        factors = jnp.where(rows > k, A[:, k] / pivot, 0.0)
        A = A - factors[:, None] * A[k][None, :]
        b = b - factors * b[k]

        worst = jnp.where(magnitude < smallest, k, worst).astype(jnp.int32)
        smallest = jnp.minimum(smallest, magnitude)
        return A, b, smallest, worst

    init = (A, b, jnp.asarray(jnp.inf, dtype=A.dtype), jnp.asarray(0, dtype=jnp.int32))
    A, b, smallest, worst = lax.fori_loop(0, n, forward, init)

    def backward(i, x):
        k = n - 1 - i
        diag = jnp.where(jnp.abs(A[k, k]) < PIVOT_TOLERANCE, 1.0, A[k, k])
        # Entries of x at or above row k are still zero
        return x.at[k].set((b[k] - jnp.dot(A[k], x)) / diag)

    x = lax.fori_loop(0, n, backward, jnp.zeros_like(b))
    return x, smallest, worst


def solve_dense(A: Array, b: Array, unknowns: Sequence[str] | None = None) -> Array:
    """
    Solve a dense float system with the JIT kernel.

    Raises:
        SingularMatrixError: if the smallest pivot magnitude is below PIVOT_TOLERANCE
    """
    if b.shape[0] == 0:
        return b
    x, smallest, worst = _eliminate(A, b)
    if float(smallest) < PIVOT_TOLERANCE:
        column = int(worst)
        raise SingularMatrixError(
            f"Circuit matrix is singular: no usable pivot in column {column}",
            column=column,
            unknown=unknowns[column] if unknowns else None,
        )
    return x
