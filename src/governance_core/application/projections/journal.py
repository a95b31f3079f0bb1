"""Application projections – EventJournal and projection rebuild.

The bus itself persists nothing.  A journal attached to a bus records each
envelope under ``eventJournal/{scope}/events/{id}`` so that projections can
later be rebuilt with :func:`rebuild_projections`.  Recording is as
best-effort as any other subscriber: a failed write is logged by the bus
and the event is missing from the journal.
"""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Awaitable

from governance_core.application.events import EventBus, Unsubscribe
from governance_core.application.projections.funnel import ProjectionFunnel
from governance_core.application.store import DocumentStore
from governance_core.kernel.events import EventEnvelope, EventType
from governance_core.observability.logging import get_logger

logger = get_logger(__name__)


def journal_collection(scope: str) -> str:
    return f"eventJournal/{scope}/events"


class EventJournal:
    """Records envelopes with a dispatch sequence number.

    Entries are ordered by ``(occurredAt, sequence)``; the sequence breaks
    ties between events published within the same clock tick.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._sequence = itertools.count(1)

    async def record(
        self, scope: str, envelope: EventEnvelope, *, sequence: int | None = None
    ) -> str:
        record = envelope.to_dict()
        record["sequence"] = sequence if sequence is not None else next(self._sequence)
        return await self._store.add(journal_collection(scope), record)

    def attach(self, bus: EventBus) -> Unsubscribe:
        """Record every event published on *bus*; returns the detach function."""

        def on_event(envelope: EventEnvelope) -> Awaitable[str]:
            # taken synchronously so detached writes keep publish order
            sequence = next(self._sequence)
            return self.record(bus.scope, envelope, sequence=sequence)

        unsubscribers = [bus.subscribe(event_type, on_event) for event_type in EventType]

        def detach() -> None:
            for unsubscribe in unsubscribers:
                unsubscribe()

        return detach

    async def load(self, *scopes: str) -> list[EventEnvelope]:
        """Recorded envelopes of *scopes*, merged in publish order."""
        rows = []
        for scope in scopes:
            rows.extend(record for _, record in await self._store.list(journal_collection(scope)))
        rows.sort(key=lambda r: (datetime.fromisoformat(r["occurredAt"]), r["sequence"]))
        return [EventEnvelope.from_dict(r) for r in rows]


async def rebuild_projections(
    journal: EventJournal, funnel: ProjectionFunnel, *scopes: str
) -> int:
    """Replay the journals of *scopes* into *funnel*; returns the event count.

    *funnel* should write to empty projections: replay re-applies every
    event and stamps fresh offsets.
    """
    replayed = await funnel.replay(await journal.load(*scopes))
    logger.info("projections_rebuilt", scopes=list(scopes), replayed=replayed)
    return replayed


__all__ = ["EventJournal", "journal_collection", "rebuild_projections"]
