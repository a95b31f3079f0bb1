"""Application projections – ProjectionFunnel.

Routes events from one or more buses into every projection interested in
them and stamps a per-projection offset in the
:class:`~governance_core.application.projections.versions.ProjectionVersionRegistry`
after each apply.  The funnel only composes read models; it never decides
whether an event is valid; that is the job of the aggregate or the saga
that published it.

Each funnel instance applies events one at a time, in the order its
handlers were invoked, so the offsets it stamps are strictly increasing
and :meth:`ProjectionFunnel.replay` of the recorded sequence rebuilds the
same state as incremental application.
"""

from __future__ import annotations

import asyncio
import dataclasses
import time
from typing import Awaitable, Callable, Iterable

from governance_core.application.events import EventBus, Unsubscribe
from governance_core.application.projections.eligible_members import EligibleMemberProjection
from governance_core.application.projections.organization_view import OrganizationViewProjection
from governance_core.application.projections.schedule_view import AccountScheduleView
from governance_core.application.projections.skill_view import AccountSkillView
from governance_core.application.projections.versions import ProjectionVersionRegistry
from governance_core.kernel.events import (
    EventEnvelope,
    EventNamespace,
    EventPayload,
    EventType,
    MemberJoined,
    MemberLeft,
    ScheduleAssigned,
    ScheduleAssignmentReleased,
    SkillRecognitionGranted,
    SkillRecognitionRevoked,
    SkillXpChanged,
)
from governance_core.observability.logging import get_logger
from governance_core.observability.metrics import Metrics, NoopMetrics

logger = get_logger(__name__)

ACCOUNT_SKILL_VIEW = "account-skill-view"
ELIGIBLE_MEMBER_VIEW = "org-eligible-member-view"
ACCOUNT_SCHEDULE_VIEW = "account-schedule"
SCHEDULE_PROPOSALS = "org-schedule-proposals"
ORGANIZATION_VIEW = "organization-view"
SKILL_RECOGNITION = "org-skill-recognition"

ApplyFn = Callable[[EventPayload, int], Awaitable[None]]


@dataclasses.dataclass(frozen=True)
class Route:
    """One projection fed by an event type.

    ``per_context`` routes keep a separate offset per organization context,
    stamped under ``{version_key}-{contextId}``.
    """

    version_key: str
    apply: ApplyFn
    per_context: bool = False

    def key_for(self, payload: EventPayload) -> str:
        if not self.per_context:
            return self.version_key
        match payload:
            case SkillRecognitionGranted(context_id=context_id) | SkillRecognitionRevoked(
                context_id=context_id
            ):
                return f"{self.version_key}-{context_id}"
            case _:
                raise TypeError(
                    f"{self.version_key} offsets need a context-scoped payload, "
                    f"got {type(payload).__name__}"
                )


def _unroutable(projection: str, payload: EventPayload) -> TypeError:
    return TypeError(f"{projection} cannot apply {type(payload).__name__}")


class ProjectionFunnel:
    def __init__(
        self,
        eligible_members: EligibleMemberProjection,
        skill_view: AccountSkillView,
        schedule_view: AccountScheduleView,
        organization_view: OrganizationViewProjection,
        versions: ProjectionVersionRegistry,
        *,
        metrics: Metrics | None = None,
    ) -> None:
        self._eligible = eligible_members
        self._skills = skill_view
        self._schedule = schedule_view
        self._organization = organization_view
        self._versions = versions
        self._metrics = metrics or NoopMetrics()
        self._lock = asyncio.Lock()

        self._routes = self._build_routes()
        unrouted = set(EventType) - set(self._routes)
        if unrouted:
            raise ValueError(f"no projection route for {sorted(t.value for t in unrouted)}")

    def _build_routes(self) -> dict[EventType, tuple[Route, ...]]:
        skill_view = Route(ACCOUNT_SKILL_VIEW, self._apply_skill_view)
        eligible = Route(ELIGIBLE_MEMBER_VIEW, self._apply_eligible_members)
        schedule = Route(ACCOUNT_SCHEDULE_VIEW, self._apply_schedule_view)
        organization = Route(ORGANIZATION_VIEW, self._apply_organization_view)
        proposals = Route(SCHEDULE_PROPOSALS, self._offset_only)
        recognition = Route(SKILL_RECOGNITION, self._offset_only, per_context=True)
        return {
            EventType.SKILL_XP_ADDED: (skill_view, eligible),
            EventType.SKILL_XP_DEDUCTED: (skill_view, eligible),
            EventType.SKILL_RECOGNITION_GRANTED: (recognition,),
            EventType.SKILL_RECOGNITION_REVOKED: (recognition,),
            EventType.MEMBER_JOINED: (eligible, organization),
            EventType.MEMBER_LEFT: (eligible, organization),
            EventType.SCHEDULE_PROPOSED: (proposals,),
            EventType.SCHEDULE_ASSIGNED: (schedule, eligible),
            EventType.SCHEDULE_ASSIGN_REJECTED: (proposals,),
            EventType.SCHEDULE_PROPOSAL_CANCELLED: (proposals,),
            EventType.SCHEDULE_ASSIGNMENT_RELEASED: (schedule, eligible),
        }

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_workspace_funnel(self, bus: EventBus) -> Unsubscribe:
        return self._register(bus, EventNamespace.WORKSPACE)

    def register_organization_funnel(self, bus: EventBus) -> Unsubscribe:
        return self._register(bus, EventNamespace.ORGANIZATION)

    def _register(self, bus: EventBus, namespace: EventNamespace) -> Unsubscribe:
        unsubscribers = [
            bus.subscribe(event_type, self._on_event)
            for event_type in EventType.in_namespace(namespace)
        ]

        def unregister() -> None:
            for unsubscribe in unsubscribers:
                unsubscribe()

        return unregister

    def _on_event(self, envelope: EventEnvelope) -> Awaitable[None]:
        return self.apply(envelope)

    # ------------------------------------------------------------------
    # Apply / replay
    # ------------------------------------------------------------------

    def routes(self, event_type: EventType) -> tuple[Route, ...]:
        return self._routes[event_type]

    async def apply(self, envelope: EventEnvelope) -> None:
        async with self._lock:
            await self._apply(envelope)

    async def replay(self, envelopes: Iterable[EventEnvelope]) -> int:
        """Apply *envelopes* in order; returns how many were replayed.

        Rebuilding from scratch expects projections and version registry
        backed by an empty store.
        """
        replayed = 0
        async with self._lock:
            for envelope in envelopes:
                await self._apply(envelope)
                replayed += 1
        logger.info("projections_replayed", count=replayed)
        return replayed

    async def _apply(self, envelope: EventEnvelope) -> None:
        for route in self._routes[envelope.event_type]:
            key = route.key_for(envelope.payload)
            offset = await self._versions.next_offset(key)
            started = time.perf_counter()
            await route.apply(envelope.payload, offset)
            await self._versions.stamp(key, offset)
            self._observe(key, offset, started)
            logger.debug(
                "projection_applied",
                projection=key,
                event_type=envelope.event_type,
                event_id=envelope.event_id,
                offset=offset,
            )

    def _observe(self, projection: str, offset: int, started: float) -> None:
        labels = {"projection": projection}
        try:
            self._metrics.gauge("projection_offset").set(offset, labels=labels)
            self._metrics.histogram("projection_apply_ms").record(
                (time.perf_counter() - started) * 1000, labels=labels
            )
        except Exception:  # noqa: BLE001
            logger.warning("projection_metrics_failed", projection=projection, exc_info=True)

    # ------------------------------------------------------------------
    # Projection adapters
    # ------------------------------------------------------------------

    async def _apply_skill_view(self, payload: EventPayload, offset: int) -> None:
        match payload:
            case SkillXpChanged():
                await self._skills.apply_skill_xp(
                    payload.subject_id, payload.skill_id, payload.new_xp, read_model_version=offset
                )
            case _:
                raise _unroutable(ACCOUNT_SKILL_VIEW, payload)

    async def _apply_eligible_members(self, payload: EventPayload, offset: int) -> None:
        match payload:
            case SkillXpChanged():
                await self._eligible.apply_skill_xp(
                    payload.context_id,
                    payload.subject_id,
                    payload.skill_id,
                    payload.new_xp,
                    read_model_version=offset,
                )
            case MemberJoined():
                await self._eligible.init_entry(
                    payload.context_id, payload.subject_id, read_model_version=offset
                )
            case MemberLeft():
                await self._eligible.remove_entry(payload.context_id, payload.subject_id)
            case ScheduleAssigned():
                await self._eligible.set_eligible(
                    payload.context_id, payload.subject_id, False, read_model_version=offset
                )
            case ScheduleAssignmentReleased():
                await self._eligible.set_eligible(
                    payload.context_id, payload.subject_id, True, read_model_version=offset
                )
            case _:
                raise _unroutable(ELIGIBLE_MEMBER_VIEW, payload)

    async def _apply_schedule_view(self, payload: EventPayload, offset: int) -> None:
        match payload:
            case ScheduleAssigned():
                await self._schedule.apply_assigned(payload, read_model_version=offset)
            case ScheduleAssignmentReleased():
                await self._schedule.apply_released(
                    payload.subject_id, payload.proposal_id, payload.outcome,
                    read_model_version=offset,
                )
            case _:
                raise _unroutable(ACCOUNT_SCHEDULE_VIEW, payload)

    async def _apply_organization_view(self, payload: EventPayload, offset: int) -> None:
        match payload:
            case MemberJoined():
                await self._organization.apply_member_joined(
                    payload.context_id, payload.subject_id, read_model_version=offset
                )
            case MemberLeft():
                await self._organization.apply_member_left(
                    payload.context_id, payload.subject_id, read_model_version=offset
                )
            case _:
                raise _unroutable(ORGANIZATION_VIEW, payload)

    async def _offset_only(self, payload: EventPayload, offset: int) -> None:
        """Events that change no read model here; only the offset advances."""


__all__ = [
    "ACCOUNT_SCHEDULE_VIEW",
    "ACCOUNT_SKILL_VIEW",
    "ELIGIBLE_MEMBER_VIEW",
    "ORGANIZATION_VIEW",
    "SCHEDULE_PROPOSALS",
    "SKILL_RECOGNITION",
    "ProjectionFunnel",
    "Route",
]
