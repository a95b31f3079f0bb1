"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError            (domain.py)
    │   ├── InvariantViolationError
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ConflictError
    │       └── ConcurrencyConflictError
    ├── ApplicationError       (application.py)
    │   └── ScopeClosedError
    └── InfrastructureError    (infrastructure.py)
        ├── StoreUnavailableError
        └── SerializationError
"""

from governance_core.kernel.errors.application import ApplicationError, ScopeClosedError
from governance_core.kernel.errors.base import BaseError
from governance_core.kernel.errors.domain import (
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from governance_core.kernel.errors.infrastructure import (
    InfrastructureError,
    SerializationError,
    StoreUnavailableError,
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
    "ScopeClosedError",
    "SerializationError",
    "StoreUnavailableError",
    "ValidationError",
]
