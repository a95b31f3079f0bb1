"""Application bootstrap – GovernanceScope.

One scope is one tenant: a workspace bus, an organization bus and every
component subscribed to them, all backed by the same document store.
Nothing is module-global, so two scopes opened side by side (even on one
store, under different ``scope_id`` values) never see each other's events.

Usage::

    scope = GovernanceScope.open(InMemoryDocumentStore(), GovernanceSettings(scope_id="acme"))
    scope.join_member("org-1", "alice")
    await scope.xp.add_xp("alice", "welding", 200, XpContext(context_id="org-1"))
    await scope.drain()
    ...
    scope.close()
"""

from __future__ import annotations

from governance_core.application.events import EventBus, Unsubscribe
from governance_core.application.notifications import (
    InMemoryNotificationSender,
    NotificationRouter,
    NotificationSender,
)
from governance_core.application.projections import (
    AccountScheduleView,
    AccountSkillView,
    EligibleMemberProjection,
    EventJournal,
    OrganizationViewProjection,
    ProjectionFunnel,
    ProjectionVersionRegistry,
    rebuild_projections,
)
from governance_core.application.scheduling import SchedulingSaga
from governance_core.application.skills import SkillXpService, XpLedger
from governance_core.application.store import DocumentStore
from governance_core.config import GovernanceSettings
from governance_core.kernel.errors import ScopeClosedError
from governance_core.kernel.events import (
    EventEnvelope,
    EventType,
    MemberJoined,
    MemberLeft,
    ReleaseOutcome,
    ScheduleAssignmentReleased,
    ScheduleProposed,
    SkillRecognitionGranted,
    SkillRecognitionRevoked,
)
from governance_core.kernel.time import Clock, SystemClock
from governance_core.observability.logging import bind_scope, configure_logging, get_logger
from governance_core.observability.metrics import InMemoryMetrics, Metrics

logger = get_logger(__name__)


def configure_observability(settings: GovernanceSettings) -> None:
    """Apply the logging settings and tag log lines from this context with the scope."""
    configure_logging(settings.log_level, json=settings.log_json)
    bind_scope(settings.scope_id)


class GovernanceScope:
    """All consistency components of one tenant, wired together."""

    def __init__(
        self,
        store: DocumentStore,
        settings: GovernanceSettings,
        *,
        metrics: Metrics,
        sender: NotificationSender,
        clock: Clock,
    ) -> None:
        self.store = store
        self.settings = settings
        self.metrics = metrics
        self.sender = sender

        scope_id = settings.scope_id
        self.workspace_bus = EventBus(f"{scope_id}:workspace", metrics=metrics, clock=clock)
        self.organization_bus = EventBus(f"{scope_id}:organization", metrics=metrics, clock=clock)

        self.eligible_members = EligibleMemberProjection(store)
        self.skill_view = AccountSkillView(store)
        self.schedule_view = AccountScheduleView(store)
        self.organization_view = OrganizationViewProjection(store)
        self.versions = ProjectionVersionRegistry(store, clock)
        self.funnel = ProjectionFunnel(
            self.eligible_members,
            self.skill_view,
            self.schedule_view,
            self.organization_view,
            self.versions,
            metrics=metrics,
        )
        self.journal = EventJournal(store)
        self.xp = SkillXpService(
            store,
            self.organization_bus,
            ledger=XpLedger(store, clock),
            clock=clock,
            max_attempts=settings.xp_max_attempts,
            retry_wait_seconds=settings.xp_retry_wait_seconds,
        )
        self.saga = SchedulingSaga(store, self.eligible_members, self.organization_bus, clock=clock)
        self.notifications = NotificationRouter(sender, self.saga)

        self._unsubscribers: list[Unsubscribe] = []
        self._closed = False

    @classmethod
    def open(
        cls,
        store: DocumentStore,
        settings: GovernanceSettings | None = None,
        *,
        metrics: Metrics | None = None,
        sender: NotificationSender | None = None,
        clock: Clock | None = None,
    ) -> "GovernanceScope":
        """Build and wire a scope.

        Subscription order on each bus: journal, projection funnel, saga,
        notifications.
        """
        scope = cls(
            store,
            settings or GovernanceSettings(),
            metrics=metrics if metrics is not None else InMemoryMetrics(),
            sender=sender if sender is not None else InMemoryNotificationSender(),
            clock=clock or SystemClock(),
        )
        scope._wire()
        logger.info("governance_scope_opened", scope=scope.scope_id)
        return scope

    def _wire(self) -> None:
        self._unsubscribers.extend(
            [
                self.journal.attach(self.workspace_bus),
                self.journal.attach(self.organization_bus),
                self.funnel.register_workspace_funnel(self.workspace_bus),
                self.funnel.register_organization_funnel(self.organization_bus),
                self.saga.register(self.workspace_bus),
                self.notifications.attach(self.organization_bus),
            ]
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def scope_id(self) -> str:
        return self.settings.scope_id

    @property
    def closed(self) -> bool:
        return self._closed

    async def drain(self) -> None:
        """Wait until neither bus has detached handler work outstanding."""
        while self.workspace_bus.pending or self.organization_bus.pending:
            await self.workspace_bus.drain()
            await self.organization_bus.drain()

    def close(self) -> None:
        """Remove every subscription this scope made; safe to call twice."""
        if self._closed:
            return
        for unsubscribe in reversed(self._unsubscribers):
            unsubscribe()
        self._unsubscribers.clear()
        self._closed = True
        logger.info("governance_scope_closed", scope=self.scope_id)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ScopeClosedError(
                f"governance scope {self.scope_id!r} is closed",
                detail={"scope": self.scope_id},
            )

    # ------------------------------------------------------------------
    # Inbound events owned by other contexts
    # ------------------------------------------------------------------

    def propose_schedule(self, proposal: ScheduleProposed) -> EventEnvelope:
        """Publish a workspace proposal; the saga picks it up."""
        self._ensure_open()
        return self.workspace_bus.publish(
            EventType.SCHEDULE_PROPOSED, proposal, source_id=proposal.workspace_id
        )

    def join_member(self, context_id: str, subject_id: str) -> EventEnvelope:
        self._ensure_open()
        return self.organization_bus.publish(
            EventType.MEMBER_JOINED,
            MemberJoined(context_id=context_id, subject_id=subject_id),
            source_id=context_id,
        )

    def leave_member(self, context_id: str, subject_id: str) -> EventEnvelope:
        self._ensure_open()
        return self.organization_bus.publish(
            EventType.MEMBER_LEFT,
            MemberLeft(context_id=context_id, subject_id=subject_id),
            source_id=context_id,
        )

    def grant_skill_recognition(
        self,
        context_id: str,
        subject_id: str,
        skill_id: str,
        *,
        granted_by: str,
        min_xp_required: int = 0,
    ) -> EventEnvelope:
        """Record an organization's recognition of a skill; XP is untouched."""
        self._ensure_open()
        return self.organization_bus.publish(
            EventType.SKILL_RECOGNITION_GRANTED,
            SkillRecognitionGranted(
                context_id=context_id,
                subject_id=subject_id,
                skill_id=skill_id,
                granted_by=granted_by,
                min_xp_required=min_xp_required,
            ),
            source_id=context_id,
        )

    def revoke_skill_recognition(
        self, context_id: str, subject_id: str, skill_id: str, *, revoked_by: str
    ) -> EventEnvelope:
        self._ensure_open()
        return self.organization_bus.publish(
            EventType.SKILL_RECOGNITION_REVOKED,
            SkillRecognitionRevoked(
                context_id=context_id,
                subject_id=subject_id,
                skill_id=skill_id,
                revoked_by=revoked_by,
            ),
            source_id=context_id,
        )

    def release_assignment(
        self,
        proposal_id: str,
        context_id: str,
        subject_id: str,
        outcome: ReleaseOutcome = ReleaseOutcome.COMPLETED,
    ) -> EventEnvelope:
        """Mark an assignment finished or called off; the assignee becomes eligible."""
        self._ensure_open()
        return self.organization_bus.publish(
            EventType.SCHEDULE_ASSIGNMENT_RELEASED,
            ScheduleAssignmentReleased(
                proposal_id=proposal_id,
                context_id=context_id,
                subject_id=subject_id,
                outcome=outcome,
            ),
            source_id=proposal_id,
        )

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------

    async def rebuild_into(self, target: DocumentStore) -> int:
        """Replay this scope's journal into fresh projections on *target*.

        Returns the number of events replayed.  Read the rebuilt state with
        projections constructed on *target*.
        """
        await self.drain()
        funnel = ProjectionFunnel(
            EligibleMemberProjection(target),
            AccountSkillView(target),
            AccountScheduleView(target),
            OrganizationViewProjection(target),
            ProjectionVersionRegistry(target),
            metrics=self.metrics,
        )
        return await rebuild_projections(
            self.journal,
            funnel,
            self.workspace_bus.scope,
            self.organization_bus.scope,
        )


__all__ = ["GovernanceScope", "configure_observability"]
