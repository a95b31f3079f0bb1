"""Application-layer errors – wiring and configuration concerns."""

from __future__ import annotations

from governance_core.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer failure (configuration, wiring)."""

    default_code = "application_error"


class ScopeClosedError(ApplicationError):
    """An operation was attempted on a governance scope after ``close()``."""

    default_code = "scope_closed"


__all__ = ["ApplicationError", "ScopeClosedError"]
