"""Kernel events – EventEnvelope and the envelope contract marker."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from typing import Any, Literal, Protocol, runtime_checkable
from uuid import uuid4

from governance_core.kernel.errors import SerializationError, ValidationError
from governance_core.kernel.events.catalog import EventPayload, EventType, payload_type


@dataclasses.dataclass(frozen=True)
class EventEnvelope:
    """A published fact: a tagged, immutable payload plus routing metadata.

    ``source_id`` identifies the aggregate or workflow that produced the
    event (a proposal id, ``"<subject>/<skill>"`` for XP changes, …).
    """

    event_type: EventType
    payload: EventPayload
    event_id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))
    source_id: str | None = None

    def __post_init__(self) -> None:
        expected = payload_type(self.event_type)
        if type(self.payload) is not expected:
            raise ValidationError(
                f"{self.event_type.value} carries {expected.__name__}, "
                f"got {type(self.payload).__name__}",
                errors=[{"field": "payload", "reason": "does not match event type"}],
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "eventType": self.event_type.value,
            "occurredAt": self.occurred_at.isoformat(),
            "sourceId": self.source_id,
            "payload": self.payload.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventEnvelope":
        try:
            event_type = EventType(data["eventType"])
            return cls(
                event_type=event_type,
                payload=payload_type(event_type).from_dict(data["payload"]),
                event_id=data["eventId"],
                occurred_at=datetime.fromisoformat(data["occurredAt"]),
                source_id=data.get("sourceId"),
            )
        except (KeyError, ValueError) as exc:
            raise SerializationError(
                f"cannot decode event envelope: {exc}",
                payload_type=str(data.get("eventType")),
                cause=exc,
            ) from exc


@runtime_checkable
class EventEnvelopeContract(Protocol):
    """Marker: components that publish events declare they emit envelopes."""

    implements_event_envelope: Literal[True]


__all__ = ["EventEnvelope", "EventEnvelopeContract"]
