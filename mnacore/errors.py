"""Exception hierarchy for netlist building and linear solves.

Both error kinds are hard failures: they propagate to the caller and no
partial result is produced.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: dict[str, Any],
) -> str:
    """
    Format a multi-line, user-facing diagnostic report.

    Args:
        error_type: High-level category of the error
        details: Description of the problem (may span lines)
        suggestion: Advice for resolving the issue
        context: Extra key/value pairs shown in the header (None values skipped)
    """
    lines = [
        "",
        "==================== mnacore: Diagnostic Report ====================",
        f"Error Type:     {error_type}",
    ]
    for key, value in context.items():
        if value is not None:
            lines.append(f"{key + ':':<16}{value}")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("=" * 68)
    return "\n".join(lines)


class CircuitError(Exception):
    """Base class for all errors raised by the analysis engine."""

    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class ConfigurationError(CircuitError, ValueError):
    """The netlist cannot be turned into a solvable topology."""
    details: str
    component_id: str | None = None

    def __str__(self) -> str:
        return self.details

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Configuration Error",
            details=self.details,
            suggestion="Add a ground component and check that every component has a known kind.",
            context={"Component": self.component_id},
        )


@dataclass(eq=False)
class SingularMatrixError(CircuitError, ArithmeticError):
    """No usable pivot was found while eliminating an MNA system."""
    details: str
    column: int | None = None
    unknown: str | None = None

    def __str__(self) -> str:
        if self.unknown is not None:
            return f"{self.details} (unknown: {self.unknown})"
        return self.details

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Singular Matrix",
            details=self.details,
            suggestion=(
                "Look for floating nodes, loops of ideal voltage sources or inductors,\n"
                "and subnetworks with no path to ground."
            ),
            context={"Column": self.column, "Unknown": self.unknown},
        )
