"""Unit tests for governance_core.testing fakes."""

from __future__ import annotations

import asyncio

import pytest

from governance_core.application.events import EventBus
from governance_core.kernel.errors import StoreUnavailableError
from governance_core.kernel.events import EventType, MemberJoined
from governance_core.testing import RecordingHandler, UnavailableDocumentStore


def _joined(subject_id: str = "alice") -> MemberJoined:
    return MemberJoined(context_id="org-1", subject_id=subject_id)


# ---------------------------------------------------------------------------
# RecordingHandler
# ---------------------------------------------------------------------------


class TestRecordingHandler:
    def test_records_synchronously(self) -> None:
        bus = EventBus("acme")
        handler = RecordingHandler()
        bus.subscribe(EventType.MEMBER_JOINED, handler)

        bus.publish(EventType.MEMBER_JOINED, _joined("alice"))
        bus.publish(EventType.MEMBER_JOINED, _joined("bob"))

        assert handler.count == 2
        assert handler.event_types == [EventType.MEMBER_JOINED] * 2
        assert [p.subject_id for p in handler.payloads] == ["alice", "bob"]  # type: ignore[attr-defined]

    def test_asynchronous_records_after_drain(self) -> None:
        async def run() -> RecordingHandler:
            bus = EventBus("acme")
            handler = RecordingHandler(asynchronous=True)
            bus.subscribe(EventType.MEMBER_JOINED, handler)
            bus.publish(EventType.MEMBER_JOINED, _joined())
            assert handler.count == 0
            await bus.drain()
            return handler

        assert asyncio.run(run()).count == 1

    def test_failing_handler_still_records(self) -> None:
        bus = EventBus("acme")
        failing = RecordingHandler(fail_with=RuntimeError("boom"))
        after = RecordingHandler()
        bus.subscribe(EventType.MEMBER_JOINED, failing)
        bus.subscribe(EventType.MEMBER_JOINED, after)

        bus.publish(EventType.MEMBER_JOINED, _joined())

        assert failing.count == 1
        assert after.count == 1

    def test_reset(self) -> None:
        handler = RecordingHandler()
        bus = EventBus("acme")
        bus.subscribe(EventType.MEMBER_JOINED, handler)
        bus.publish(EventType.MEMBER_JOINED, _joined())
        handler.reset()
        assert handler.received == []


# ---------------------------------------------------------------------------
# UnavailableDocumentStore
# ---------------------------------------------------------------------------


class TestUnavailableDocumentStore:
    def test_every_operation_fails_by_default(self) -> None:
        store = UnavailableDocumentStore()

        async def run() -> None:
            with pytest.raises(StoreUnavailableError):
                await store.get("members/alice")
            with pytest.raises(StoreUnavailableError):
                await store.set("members/alice", {"eligible": True})

        asyncio.run(run())
        assert store.failures == 2

    def test_only_selected_operations_fail(self) -> None:
        store = UnavailableDocumentStore(operations={"set"})

        async def run() -> None:
            assert await store.get("members/alice") is None
            with pytest.raises(StoreUnavailableError):
                await store.set("members/alice", {"eligible": True})

        asyncio.run(run())
        assert store.failures == 1

    def test_recovers_when_available(self) -> None:
        store = UnavailableDocumentStore()
        store.available = True

        async def run() -> dict | None:
            await store.set("members/alice", {"eligible": True})
            return await store.get("members/alice")

        assert asyncio.run(run()) == {"eligible": True}
        assert store.failures == 0


# ---------------------------------------------------------------------------
# Fixtures plugin
# ---------------------------------------------------------------------------


class TestFixtures:
    def test_organization_bus_uses_shared_metrics_and_clock(
        self, organization_bus: EventBus, metrics, step_clock  # type: ignore[no-untyped-def]
    ) -> None:
        first = organization_bus.publish(EventType.MEMBER_JOINED, _joined("alice"))
        second = organization_bus.publish(EventType.MEMBER_JOINED, _joined("bob"))

        assert organization_bus.scope == "test:organization"
        assert second.occurred_at > first.occurred_at
        assert step_clock.call_count == 2
        assert metrics.counter_value("events_published_total") == 2

    def test_document_store_starts_empty(self, document_store) -> None:  # type: ignore[no-untyped-def]
        assert document_store.dump() == {}
