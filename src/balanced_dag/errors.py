"""Error hierarchy for balanced_dag."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class BalancedDagError(Exception):
    """Base exception for balanced_dag failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(BalancedDagError):
    """Configuration loading or validation error."""


class ValidationError(BalancedDagError):
    """Validation error for input graphs or settings."""


class CyclicInputError(ValidationError):
    """The adjacency graph contains a cycle."""


class UnknownVertexError(ValidationError):
    """An edge references a vertex with no vertex record."""


class BalancingInvariantError(BalancedDagError):
    """Edge weights cannot make every path sum to the basis weight."""


class PathLimitError(BalancedDagError):
    """Path enumeration exceeded the configured limit."""


__all__ = [
    "BalancedDagError",
    "ConfigError",
    "ValidationError",
    "CyclicInputError",
    "UnknownVertexError",
    "BalancingInvariantError",
    "PathLimitError",
]
