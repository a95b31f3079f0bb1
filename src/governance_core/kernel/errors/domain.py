"""Domain errors – rule violations raised synchronously to the caller.

Business outcomes such as a skill-tier mismatch are *not* errors; they are
returned as values by the scheduling saga.
"""

from __future__ import annotations

from typing import Any

from governance_core.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule is violated."""

    default_code = "domain_error"


class InvariantViolationError(DomainError):
    """An aggregate invariant would be broken by the requested change."""

    default_code = "invariant_violation"


class ValidationError(DomainError):
    """Input does not meet validation rules.

    ``errors`` carries field-level failures, e.g.
    ``[{"field": "delta", "reason": "must be positive"}]``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


class ConcurrencyConflictError(ConflictError):
    """A document read inside a transaction changed before commit."""

    default_code = "concurrency_conflict"

    def __init__(self, path: str, expected: int, actual: int, **kwargs: Any) -> None:
        super().__init__(
            f"Concurrent write on '{path}': read revision {expected}, found {actual}",
            detail={"path": path, "expected": expected, "actual": actual},
            **kwargs,
        )
        self.path = path
        self.expected = expected
        self.actual = actual


__all__ = [
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "InvariantViolationError",
    "NotFoundError",
    "ValidationError",
]
