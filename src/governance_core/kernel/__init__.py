"""Kernel – framework-agnostic building blocks (errors, events, skills, time)."""

from governance_core.kernel.errors import (
    ApplicationError,
    BaseError,
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InvariantViolationError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "InvariantViolationError",
    "NotFoundError",
    "StoreUnavailableError",
    "ValidationError",
]
