"""Unit tests for the read models and the projection version registry."""

from __future__ import annotations

import asyncio

from governance_core.application.projections import (
    AccountScheduleView,
    AccountSkillView,
    EligibleMemberProjection,
    ProjectionVersionRegistry,
    SkillStanding,
    member_path,
)
from governance_core.application.store import InMemoryDocumentStore
from governance_core.kernel.events import ReleaseOutcome, ScheduleAssigned
from governance_core.kernel.skills import SkillTier
from governance_core.testing import StepClock


def _assigned(subject_id: str = "alice") -> ScheduleAssigned:
    return ScheduleAssigned(
        proposal_id="p-1",
        workspace_id="ws-1",
        context_id="org-1",
        subject_id=subject_id,
        assigned_by="owner",
        title="Night shift",
        start_date="2026-03-01",
        end_date="2026-03-02",
    )


# ---------------------------------------------------------------------------
# Eligible-member view
# ---------------------------------------------------------------------------


class TestEligibleMemberProjection:
    def test_init_entry_creates_eligible_member(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice", read_model_version=1)
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is True
            assert view.skills == {}
            assert view.read_model_version == 1

        asyncio.run(run())

    def test_init_entry_keeps_existing_state(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.apply_skill_xp("org-1", "alice", "welding", 200)
            await projection.set_eligible("org-1", "alice", False)
            await projection.init_entry("org-1", "alice", read_model_version=7)
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is False
            assert view.standing("welding") == SkillStanding(200, SkillTier.EXPERT)

        asyncio.run(run())

    def test_apply_skill_xp_never_touches_eligibility(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice")
            await projection.set_eligible("org-1", "alice", False)
            await projection.apply_skill_xp("org-1", "alice", "welding", 80, read_model_version=3)
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.eligible is False
            assert view.read_model_version == 3
            assert view.standing("welding").tier is SkillTier.JOURNEYMAN

        asyncio.run(run())

    def test_tier_is_computed_not_stored(self) -> None:
        async def run() -> None:
            store = InMemoryDocumentStore()
            projection = EligibleMemberProjection(store)
            await projection.apply_skill_xp("org-1", "alice", "welding", 450)
            record = await store.get(member_path("org-1", "alice"))
            assert record == {
                "contextId": "org-1",
                "subjectId": "alice",
                "skills": {"welding": {"xp": 450}},
                "eligible": True,
                "readModelVersion": 0,
            }

        asyncio.run(run())

    def test_dotted_skill_ids_stay_flat(self) -> None:
        async def run() -> None:
            store = InMemoryDocumentStore()
            projection = EligibleMemberProjection(store)
            await projection.init_entry("org-1", "alice")
            await projection.apply_skill_xp("org-1", "alice", "node.js", 200)
            await projection.apply_skill_xp("org-1", "alice", "welding", 80)
            await projection.apply_skill_xp("org-1", "alice", "node.js", 260)

            record = await store.get(member_path("org-1", "alice"))
            assert record is not None
            assert record["skills"] == {"node.js": {"xp": 260}, "welding": {"xp": 80}}
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.standing("node.js") == SkillStanding(260, SkillTier.ARTISAN)
            assert "node" not in view.skills

        asyncio.run(run())

    def test_unknown_skill_counts_as_zero(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice")
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.standing("painting") == SkillStanding(0, SkillTier.APPRENTICE)

        asyncio.run(run())

    def test_set_eligible_on_missing_entry_is_noop(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            assert await projection.set_eligible("org-1", "ghost", False) is False
            assert await projection.get_entry("org-1", "ghost") is None

        asyncio.run(run())

    def test_set_eligible_keeps_version_unless_given(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice", read_model_version=4)
            assert await projection.set_eligible("org-1", "alice", False) is True
            view = await projection.get_entry("org-1", "alice")
            assert view is not None
            assert view.read_model_version == 4

        asyncio.run(run())

    def test_list_members_filters_unavailable(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice")
            await projection.init_entry("org-1", "bob")
            await projection.init_entry("org-2", "carol")
            await projection.set_eligible("org-1", "bob", False)
            eligible = await projection.list_members("org-1")
            everyone = await projection.list_members("org-1", eligible_only=False)
            assert [v.subject_id for v in eligible] == ["alice"]
            assert sorted(v.subject_id for v in everyone) == ["alice", "bob"]

        asyncio.run(run())

    def test_remove_entry(self) -> None:
        async def run() -> None:
            projection = EligibleMemberProjection(InMemoryDocumentStore())
            await projection.init_entry("org-1", "alice")
            await projection.remove_entry("org-1", "alice")
            await projection.remove_entry("org-1", "alice")
            assert await projection.get_entry("org-1", "alice") is None

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Account views
# ---------------------------------------------------------------------------


class TestAccountSkillView:
    def test_latest_xp_wins(self) -> None:
        async def run() -> None:
            view = AccountSkillView(InMemoryDocumentStore())
            await view.apply_skill_xp("alice", "welding", 100)
            await view.apply_skill_xp("alice", "welding", 310)
            await view.apply_skill_xp("alice", "rigging", 10)
            assert await view.get_skills("alice") == {
                "welding": SkillStanding(310, SkillTier.GRANDMASTER),
                "rigging": SkillStanding(10, SkillTier.APPRENTICE),
            }

        asyncio.run(run())


class TestAccountScheduleView:
    def test_assigned_then_released(self) -> None:
        async def run() -> None:
            view = AccountScheduleView(InMemoryDocumentStore())
            await view.apply_assigned(_assigned(), read_model_version=1)
            assert [i["status"] for i in await view.get_items("alice")] == ["upcoming"]
            await view.apply_released("alice", "p-1", ReleaseOutcome.CANCELLED, read_model_version=2)
            items = await view.get_items("alice")
            assert items[0]["status"] == "cancelled"
            assert items[0]["readModelVersion"] == 2
            assert await view.get_items("alice", status="upcoming") == []

        asyncio.run(run())

    def test_release_of_unknown_item_is_ignored(self) -> None:
        async def run() -> None:
            view = AccountScheduleView(InMemoryDocumentStore())
            await view.apply_released("alice", "p-404", ReleaseOutcome.COMPLETED)
            assert await view.get_items("alice") == []

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Version registry
# ---------------------------------------------------------------------------


class TestProjectionVersionRegistry:
    def test_offsets_start_at_one(self) -> None:
        registry = ProjectionVersionRegistry(InMemoryDocumentStore(), StepClock())
        assert asyncio.run(registry.next_offset("account-skill-view")) == 1

    def test_stamp_never_moves_backwards(self) -> None:
        async def run() -> None:
            registry = ProjectionVersionRegistry(InMemoryDocumentStore(), StepClock())
            await registry.stamp("view", 5)
            kept = await registry.stamp("view", 3)
            assert kept.last_event_offset == 5
            assert await registry.next_offset("view") == 6

        asyncio.run(run())

    def test_read_model_version_is_stamp_time(self) -> None:
        async def run() -> None:
            clock = StepClock()
            registry = ProjectionVersionRegistry(InMemoryDocumentStore(), clock)
            expected = clock.peek().isoformat()
            version = await registry.stamp("view", 1)
            assert version.read_model_version == expected

        asyncio.run(run())

    def test_all_and_reset(self) -> None:
        async def run() -> None:
            registry = ProjectionVersionRegistry(InMemoryDocumentStore(), StepClock())
            await registry.stamp("a", 1)
            await registry.stamp("b", 2)
            assert {n: v.last_event_offset for n, v in (await registry.all()).items()} == {
                "a": 1,
                "b": 2,
            }
            await registry.reset()
            assert await registry.all() == {}
            assert await registry.get("a") is None

        asyncio.run(run())
