"""Application events – EventBus, the per-scope in-process pub/sub engine.

Dispatch model
--------------
``publish`` is synchronous and fire-and-forget:

* handlers registered for the event type are snapshotted, then invoked one
  after another in registration order;
* a handler that raises is logged and skipped, the remaining handlers still
  run and ``publish`` still returns normally;
* a handler that returns an awaitable (``async def`` handlers) has it
  scheduled as a detached task on the running event loop.  Its failures are
  logged as well.  The publisher never waits for it.

Ordering holds within one ``publish`` call only.  Detached work from
independent publishes may interleave at any ``await``, and there is no
back-pressure: a slow async handler accumulates tasks.  :meth:`EventBus.drain`
awaits all outstanding handler tasks (shutdown, tests, replay).

Each bus instance belongs to exactly one scope.  Nothing is shared between
instances, so two tenants never see each other's subscriptions.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Literal

from governance_core.kernel.events import EventEnvelope, EventPayload, EventType
from governance_core.kernel.time import Clock, SystemClock
from governance_core.observability.logging import get_logger
from governance_core.observability.metrics import InMemoryMetrics, Metrics

#: Handler signature; async handlers return an awaitable that runs detached.
Handler = Callable[[EventEnvelope], "Awaitable[None] | None"]
Unsubscribe = Callable[[], None]

PUBLISHED_COUNTER = "events_published_total"

logger = get_logger(__name__)


class _Subscription:
    __slots__ = ("handler",)

    def __init__(self, handler: Handler) -> None:
        self.handler = handler


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """In-process publish/subscribe bus for one scope.

    Example::

        bus = EventBus("acme")
        unsubscribe = bus.subscribe(EventType.MEMBER_JOINED, on_joined)
        bus.publish(EventType.MEMBER_JOINED, MemberJoined(context_id="acme", subject_id="u1"))
        await bus.drain()
        unsubscribe()
    """

    implements_event_envelope: Literal[True] = True

    def __init__(
        self,
        scope: str,
        *,
        metrics: Metrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._scope = scope
        self._metrics = metrics if metrics is not None else InMemoryMetrics()
        self._clock = clock or SystemClock()
        self._subscriptions: dict[EventType, list[_Subscription]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._log = logger.bind(scope=scope)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    @property
    def pending(self) -> int:
        """Number of detached handler tasks still running."""
        return len(self._tasks)

    def handler_count(self, event_type: EventType) -> int:
        return len(self._subscriptions.get(event_type, ()))

    def subscribe(self, event_type: EventType, handler: Handler) -> Unsubscribe:
        """Register *handler* for *event_type*; return a function that removes it.

        The returned function is idempotent.  Removing a handler while a
        dispatch is in progress does not affect that dispatch.
        """
        subscription = _Subscription(handler)
        self._subscriptions.setdefault(event_type, []).append(subscription)

        def unsubscribe() -> None:
            registered = self._subscriptions.get(event_type)
            if registered is None:
                return
            for idx, candidate in enumerate(registered):
                if candidate is subscription:
                    del registered[idx]
                    break

        return unsubscribe

    def publish(
        self,
        event_type: EventType,
        payload: EventPayload,
        *,
        source_id: str | None = None,
    ) -> EventEnvelope:
        """Dispatch *payload* to every handler of *event_type*.

        Raises :class:`~governance_core.kernel.errors.ValidationError` when
        *payload* is not the shape bound to *event_type*; handler failures
        are never raised.
        """
        envelope = EventEnvelope(
            event_type=event_type,
            payload=payload,
            occurred_at=self._clock.now(),
            source_id=source_id,
        )
        self._record_published(event_type)

        for subscription in tuple(self._subscriptions.get(event_type, ())):
            try:
                result = subscription.handler(envelope)
            except Exception:
                self._log.exception(
                    "event_handler_failed",
                    event_type=event_type,
                    event_id=envelope.event_id,
                    handler=_handler_name(subscription.handler),
                )
                continue
            if inspect.isawaitable(result):
                self._detach(result, envelope, subscription.handler)
        return envelope

    async def drain(self) -> None:
        """Wait until no detached handler task is outstanding.

        Handlers may publish further events while they run; draining keeps
        going until the bus is quiet.
        """
        while self._tasks:
            await asyncio.gather(*tuple(self._tasks))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record_published(self, event_type: EventType) -> None:
        try:
            self._metrics.counter(
                PUBLISHED_COUNTER, "Events published per type"
            ).add(1, labels={"event_type": event_type.value, "scope": self._scope})
        except Exception:  # noqa: BLE001
            self._log.warning("event_metrics_failed", event_type=event_type, exc_info=True)

    def _detach(
        self,
        awaitable: Awaitable[Any],
        envelope: EventEnvelope,
        handler: Handler,
    ) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._log.error(
                "event_handler_no_loop",
                event_type=envelope.event_type,
                handler=_handler_name(handler),
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = loop.create_task(self._guard(awaitable, envelope, handler))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _guard(
        self,
        awaitable: Awaitable[Any],
        envelope: EventEnvelope,
        handler: Handler,
    ) -> None:
        try:
            await awaitable
        except Exception:
            self._log.exception(
                "event_handler_failed",
                event_type=envelope.event_type,
                event_id=envelope.event_id,
                handler=_handler_name(handler),
            )


__all__ = ["PUBLISHED_COUNTER", "EventBus", "Handler", "Unsubscribe"]
