"""Infrastructure errors – I/O failures propagated unchanged to callers."""

from __future__ import annotations

from typing import Any

from governance_core.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class StoreUnavailableError(InfrastructureError):
    """The document store could not be reached."""

    default_code = "store_unavailable"

    def __init__(
        self,
        resource: str = "document-store",
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Document store '{resource}' is unavailable", **kwargs)
        self.resource = resource


class SerializationError(InfrastructureError):
    """A stored record or journal entry could not be decoded."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "InfrastructureError",
    "SerializationError",
    "StoreUnavailableError",
]
