"""Testing generators – Hypothesis strategies for the skill domain.

Requires the ``hypothesis`` package (``pip install "governance-core[test]"``).
"""
from __future__ import annotations

import hypothesis.strategies as st

from governance_core.kernel.skills import SKILL_XP_MAX, SKILL_XP_MIN, SkillRequirement, SkillTier

_IDENTIFIER_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789-"


def identifier_strategy() -> st.SearchStrategy[str]:
    """Non-empty slug usable as subject, skill or context id."""
    return st.text(alphabet=_IDENTIFIER_ALPHABET, min_size=1, max_size=12)


def xp_strategy() -> st.SearchStrategy[int]:
    """Any XP value an aggregate may hold."""
    return st.integers(min_value=SKILL_XP_MIN, max_value=SKILL_XP_MAX)


def xp_delta_strategy(max_value: int = 2 * SKILL_XP_MAX) -> st.SearchStrategy[int]:
    """Positive deltas, including ones far beyond the cap."""
    return st.integers(min_value=1, max_value=max_value)


def xp_operations_strategy(max_size: int = 30) -> st.SearchStrategy[list[tuple[str, int]]]:
    """Sequences of ``("add" | "deduct", delta)`` commands.

    Example::

        @given(xp_operations_strategy())
        def test_ledger_matches(ops):
            ...
    """
    return st.lists(
        st.tuples(st.sampled_from(["add", "deduct"]), xp_delta_strategy(300)),
        max_size=max_size,
    )


def skill_tier_strategy() -> st.SearchStrategy[SkillTier]:
    return st.sampled_from(list(SkillTier))


def skill_requirement_strategy() -> st.SearchStrategy[SkillRequirement]:
    return st.builds(
        SkillRequirement,
        skill_id=identifier_strategy(),
        minimum_tier=skill_tier_strategy(),
        quantity=st.integers(min_value=1, max_value=5),
    )


__all__ = [
    "identifier_strategy",
    "skill_requirement_strategy",
    "skill_tier_strategy",
    "xp_delta_strategy",
    "xp_operations_strategy",
    "xp_strategy",
]
