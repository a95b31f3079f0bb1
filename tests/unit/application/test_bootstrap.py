"""End-to-end tests through a wired GovernanceScope."""

from __future__ import annotations

import asyncio

import pytest

from governance_core.application.bootstrap import GovernanceScope
from governance_core.application.events import PUBLISHED_COUNTER
from governance_core.application.notifications import InMemoryNotificationSender
from governance_core.application.projections import SKILL_RECOGNITION, EligibleMemberProjection
from governance_core.application.scheduling import ProposalStatus
from governance_core.application.skills import XpContext
from governance_core.application.store import InMemoryDocumentStore
from governance_core.config import GovernanceSettings
from governance_core.kernel.errors import ScopeClosedError
from governance_core.kernel.events import EventType, ScheduleProposed
from governance_core.kernel.skills import SkillRequirement, SkillTier
from governance_core.observability.metrics import InMemoryMetrics
from governance_core.testing import RecordingHandler

CTX = XpContext(context_id="org-1")


def _proposal(proposal_id: str = "p-1", minimum_tier: SkillTier = SkillTier.EXPERT) -> ScheduleProposed:
    return ScheduleProposed(
        proposal_id=proposal_id,
        workspace_id="ws-1",
        context_id="org-1",
        title="Night shift",
        start_date="2026-03-01",
        end_date="2026-03-02",
        proposed_by="owner",
        skill_requirements=(SkillRequirement("welding", minimum_tier, 1),),
    )


def _read_models(store: InMemoryDocumentStore) -> dict[str, dict]:
    prefixes = (
        "eligibleMemberView/",
        "accountSkillView/",
        "accountScheduleView/",
        "organizationView/",
    )
    return {path: doc for path, doc in store.dump().items() if path.startswith(prefixes)}


async def _member_with_xp(scope: GovernanceScope, subject_id: str, xp: int) -> None:
    scope.join_member("org-1", subject_id)
    await scope.xp.add_xp(subject_id, "welding", xp, CTX)
    await scope.drain()


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestXpScenario:
    def test_clamped_add_is_ledgered_and_projected(self, governance_scope: GovernanceScope) -> None:
        async def run() -> None:
            scope = governance_scope
            first = await scope.xp.add_xp("alice", "welding", 500, CTX)
            second = await scope.xp.add_xp("alice", "welding", 100, CTX)
            await scope.drain()

            assert (first.new_xp, first.applied_delta) == (500, 500)
            assert (second.new_xp, second.applied_delta) == (525, 25)
            entries = await scope.xp.ledger.entries("alice", "welding")
            assert [e.delta for e in entries] == [500, 25]
            skills = await scope.skill_view.get_skills("alice")
            assert skills["welding"].xp == 525
            assert skills["welding"].tier is SkillTier.TITAN
            view = await scope.eligible_members.get_entry("org-1", "alice")
            assert view is not None
            assert view.standing("welding").xp == 525

        asyncio.run(run())


class TestSchedulingScenario:
    def test_expert_candidate_is_confirmed(
        self,
        governance_scope: GovernanceScope,
        notification_sender: InMemoryNotificationSender,
    ) -> None:
        async def run() -> None:
            scope = governance_scope
            await _member_with_xp(scope, "alice", 160)
            scope.propose_schedule(_proposal())
            await scope.drain()

            outcome = await scope.saga.approve("p-1", ["alice"], approved_by="manager")
            await scope.drain()

            assert outcome.outcome == "confirmed"
            view = await scope.eligible_members.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is False
            items = await scope.schedule_view.get_items("alice")
            assert [(i["proposalId"], i["status"]) for i in items] == [("p-1", "upcoming")]
            assert [n.title for n in notification_sender.for_recipient("alice")] == [
                "New assignment"
            ]

        asyncio.run(run())

    def test_journeyman_candidate_is_rejected_with_compensation(
        self,
        governance_scope: GovernanceScope,
        notification_sender: InMemoryNotificationSender,
    ) -> None:
        async def run() -> None:
            scope = governance_scope
            rejected = RecordingHandler()
            scope.organization_bus.subscribe(EventType.SCHEDULE_ASSIGN_REJECTED, rejected)
            await _member_with_xp(scope, "alice", 140)
            scope.propose_schedule(_proposal())
            await scope.drain()

            outcome = await scope.saga.approve("p-1", ["alice"], approved_by="manager")
            await scope.drain()

            assert outcome.outcome == "rejected"
            assert outcome.reason
            assert rejected.count == 1
            view = await scope.eligible_members.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is True
            assert (await scope.saga.get_proposal("p-1")).status is ProposalStatus.PROPOSED
            assert [n.recipient_id for n in notification_sender.sent] == ["owner"]

        asyncio.run(run())

    def test_cancelling_confirmed_proposal_is_noop(
        self,
        governance_scope: GovernanceScope,
        notification_sender: InMemoryNotificationSender,
    ) -> None:
        async def run() -> None:
            scope = governance_scope
            cancelled = RecordingHandler()
            scope.organization_bus.subscribe(EventType.SCHEDULE_PROPOSAL_CANCELLED, cancelled)
            await _member_with_xp(scope, "alice", 200)
            scope.propose_schedule(_proposal())
            await scope.drain()
            await scope.saga.approve("p-1", ["alice"], approved_by="manager")
            await scope.drain()
            sent_before = notification_sender.count

            outcome = await scope.saga.cancel("p-1", cancelled_by="owner")
            await scope.drain()

            assert outcome.noop
            assert outcome.status is ProposalStatus.CONFIRMED
            assert cancelled.count == 0
            assert notification_sender.count == sent_before

        asyncio.run(run())

    def test_release_makes_assignee_eligible_again(self, governance_scope: GovernanceScope) -> None:
        async def run() -> None:
            scope = governance_scope
            await _member_with_xp(scope, "alice", 200)
            scope.propose_schedule(_proposal())
            await scope.drain()
            await scope.saga.approve("p-1", ["alice"], approved_by="manager")
            scope.release_assignment("p-1", "org-1", "alice")
            await scope.drain()

            view = await scope.eligible_members.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is True
            items = await scope.schedule_view.get_items("alice")
            assert items[0]["status"] == "completed"

        asyncio.run(run())


    def test_roster_and_recognition(self, governance_scope: GovernanceScope) -> None:
        async def run() -> None:
            scope = governance_scope
            await _member_with_xp(scope, "alice", 120)
            scope.join_member("org-1", "bob")
            scope.leave_member("org-1", "bob")
            scope.grant_skill_recognition(
                "org-1", "alice", "welding", granted_by="owner", min_xp_required=75
            )
            scope.revoke_skill_recognition("org-1", "alice", "welding", revoked_by="owner")
            await scope.drain()

            roster = await scope.organization_view.get("org-1")
            assert roster is not None
            assert roster.member_ids == ("alice",)
            assert roster.member_count == 1
            version = await scope.versions.get(f"{SKILL_RECOGNITION}-org-1")
            assert version is not None
            assert version.last_event_offset == 2
            view = await scope.eligible_members.get_entry("org-1", "alice")
            assert view is not None
            assert view.standing("welding").xp == 120

        asyncio.run(run())



# ---------------------------------------------------------------------------
# Rebuild
# ---------------------------------------------------------------------------


class TestRebuild:
    def test_rebuilt_projections_match_live_ones(self, governance_scope: GovernanceScope) -> None:
        async def run() -> None:
            scope = governance_scope
            await _member_with_xp(scope, "alice", 200)
            await _member_with_xp(scope, "bob", 90)
            await scope.xp.deduct_xp("bob", "welding", 30, CTX)
            scope.propose_schedule(_proposal("p-1"))
            scope.propose_schedule(_proposal("p-2", SkillTier.TITAN))
            await scope.drain()
            await scope.saga.approve("p-1", ["alice"], approved_by="manager")
            await scope.saga.approve("p-2", ["bob"], approved_by="manager")
            scope.leave_member("org-1", "bob")
            await scope.drain()

            target = InMemoryDocumentStore()
            replayed = await scope.rebuild_into(target)

            assert replayed > 0
            assert _read_models(target) == _read_models(scope.store)
            rebuilt = await EligibleMemberProjection(target).list_members(
                "org-1", eligible_only=False
            )
            assert [(v.subject_id, v.eligible) for v in rebuilt] == [("alice", False)]

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Lifecycle and isolation
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_defaults(self) -> None:
        scope = GovernanceScope.open(InMemoryDocumentStore())
        assert scope.scope_id == "default"
        assert scope.workspace_bus.scope == "default:workspace"
        assert isinstance(scope.metrics, InMemoryMetrics)
        scope.close()

    def test_close_unsubscribes_everything(self) -> None:
        scope = GovernanceScope.open(InMemoryDocumentStore(), GovernanceSettings(scope_id="acme"))
        assert scope.organization_bus.handler_count(EventType.SKILL_XP_ADDED) > 0
        scope.close()
        scope.close()
        assert scope.closed
        for event_type in EventType:
            assert scope.organization_bus.handler_count(event_type) == 0
            assert scope.workspace_bus.handler_count(event_type) == 0

    def test_commands_after_close_raise(self) -> None:
        scope = GovernanceScope.open(InMemoryDocumentStore())
        scope.close()
        with pytest.raises(ScopeClosedError):
            scope.join_member("org-1", "alice")
        with pytest.raises(ScopeClosedError):
            scope.propose_schedule(_proposal())

    def test_scopes_do_not_share_subscriptions(self) -> None:
        async def run() -> None:
            store = InMemoryDocumentStore()
            acme = GovernanceScope.open(store, GovernanceSettings(scope_id="acme"))
            globex = GovernanceScope.open(store, GovernanceSettings(scope_id="globex"))
            seen = RecordingHandler()
            globex.organization_bus.subscribe(EventType.MEMBER_JOINED, seen)
            acme.join_member("org-1", "alice")
            await acme.drain()
            assert seen.count == 0
            assert await globex.journal.load("globex:organization") == []
            assert len(await acme.journal.load("acme:organization")) == 1

        asyncio.run(run())

    def test_publish_counter_labelled_by_scope(
        self, governance_scope: GovernanceScope, metrics: InMemoryMetrics
    ) -> None:
        async def run() -> None:
            governance_scope.join_member("org-1", "alice")
            await governance_scope.drain()

        asyncio.run(run())
        assert (
            metrics.counter_value(
                PUBLISHED_COUNTER,
                {"event_type": "organization:member:joined", "scope": "test:organization"},
            )
            == 1
        )

    def test_settings_flow_into_xp_service(self) -> None:
        settings = GovernanceSettings(scope_id="acme", xp_max_attempts=2)
        scope = GovernanceScope.open(InMemoryDocumentStore(), settings)
        assert scope.xp._max_attempts == 2
        scope.close()
