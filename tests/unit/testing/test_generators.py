"""Unit tests for StepClock and the hypothesis strategies."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from hypothesis import given

from governance_core.kernel.skills import SKILL_XP_MAX, SKILL_XP_MIN, SkillRequirement, SkillTier
from governance_core.testing import StepClock
from governance_core.testing.generators.strategies import (
    identifier_strategy,
    skill_requirement_strategy,
    xp_operations_strategy,
    xp_strategy,
)


class TestStepClock:
    def test_default_start_and_step(self) -> None:
        clock = StepClock()
        assert clock.now() == datetime(2026, 1, 1, tzinfo=UTC)
        assert clock.now() == datetime(2026, 1, 1, 0, 0, 1, tzinfo=UTC)
        assert clock.call_count == 2

    def test_step_kwargs(self) -> None:
        clock = StepClock(milliseconds=10)
        first, second = clock.now(), clock.now()
        assert second - first == timedelta(milliseconds=10)

    def test_peek_does_not_advance(self) -> None:
        clock = StepClock(step=timedelta(minutes=5))
        peeked = clock.peek()
        assert clock.now() == peeked
        assert clock.call_count == 1

    def test_reset(self) -> None:
        start = datetime(2025, 6, 1, tzinfo=UTC)
        clock = StepClock(start)
        clock.now()
        clock.now()
        clock.reset()
        assert clock.call_count == 0
        assert clock.now() == start


class TestStrategies:
    @given(identifier_strategy())
    def test_identifiers_are_non_empty_slugs(self, value: str) -> None:
        assert value
        assert "/" not in value

    @given(xp_strategy())
    def test_xp_within_bounds(self, value: int) -> None:
        assert SKILL_XP_MIN <= value <= SKILL_XP_MAX

    @given(xp_operations_strategy())
    def test_operations_shape(self, ops: list[tuple[str, int]]) -> None:
        for op, delta in ops:
            assert op in ("add", "deduct")
            assert 1 <= delta <= 300

    @given(skill_requirement_strategy())
    def test_requirements_are_valid(self, requirement: SkillRequirement) -> None:
        assert requirement.quantity >= 1
        assert isinstance(requirement.minimum_tier, SkillTier)
