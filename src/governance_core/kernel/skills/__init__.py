"""Kernel skills – tier scale and staffing requirements."""
from governance_core.kernel.skills.requirement import SkillRequirement
from governance_core.kernel.skills.tier import (
    SKILL_XP_MAX,
    SKILL_XP_MIN,
    TIER_DEFINITIONS,
    SkillTier,
    TierDefinition,
    clamp_xp,
    get_tier_definition,
    resolve_tier,
    tier_rank,
    tier_satisfies,
)

__all__ = [
    "SKILL_XP_MAX",
    "SKILL_XP_MIN",
    "TIER_DEFINITIONS",
    "SkillRequirement",
    "SkillTier",
    "TierDefinition",
    "clamp_xp",
    "get_tier_definition",
    "resolve_tier",
    "tier_rank",
    "tier_satisfies",
]
