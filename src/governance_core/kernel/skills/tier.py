"""Kernel skills – the seven-tier proficiency scale.

Tier is always derived from XP through :func:`resolve_tier`; it is never
persisted by any aggregate or projection.
"""
from __future__ import annotations

import dataclasses
import enum

from governance_core.kernel.errors import ValidationError

SKILL_XP_MIN = 0
SKILL_XP_MAX = 525


class SkillTier(enum.Enum):
    """Stable tier identifiers (safe for storage and wire payloads)."""

    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    EXPERT = "expert"
    ARTISAN = "artisan"
    GRANDMASTER = "grandmaster"
    LEGENDARY = "legendary"
    TITAN = "titan"

    @classmethod
    def parse(cls, value: "SkillTier | str") -> "SkillTier":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown skill tier {value!r}",
                errors=[{"field": "minimumTier", "reason": "unknown tier"}],
                cause=exc,
            ) from exc


@dataclasses.dataclass(frozen=True)
class TierDefinition:
    tier: SkillTier
    rank: int
    label: str
    min_xp: int
    max_xp: int
    """Exclusive upper bound; the last tier is open-ended above it."""


TIER_DEFINITIONS: tuple[TierDefinition, ...] = (
    TierDefinition(SkillTier.APPRENTICE, 1, "Apprentice", 0, 75),
    TierDefinition(SkillTier.JOURNEYMAN, 2, "Journeyman", 75, 150),
    TierDefinition(SkillTier.EXPERT, 3, "Expert", 150, 225),
    TierDefinition(SkillTier.ARTISAN, 4, "Artisan", 225, 300),
    TierDefinition(SkillTier.GRANDMASTER, 5, "Grandmaster", 300, 375),
    TierDefinition(SkillTier.LEGENDARY, 6, "Legendary", 375, 450),
    TierDefinition(SkillTier.TITAN, 7, "Titan", 450, 525),
)

_BY_TIER: dict[SkillTier, TierDefinition] = {d.tier: d for d in TIER_DEFINITIONS}


def clamp_xp(xp: int) -> int:
    """Clamp *xp* into ``[SKILL_XP_MIN, SKILL_XP_MAX]``."""
    return max(SKILL_XP_MIN, min(SKILL_XP_MAX, xp))


def resolve_tier(xp: int) -> SkillTier:
    """Derive the tier for *xp*.

    Scans the table in ascending order and returns the first tier whose
    upper bound exceeds *xp*, so a value sitting exactly on a boundary
    belongs to the higher tier (``resolve_tier(75) is JOURNEYMAN``).
    Values below zero resolve to apprentice, values above the cap to titan.
    """
    for definition in TIER_DEFINITIONS:
        if xp < definition.max_xp:
            return definition.tier
    return SkillTier.TITAN


def get_tier_definition(tier: SkillTier | str) -> TierDefinition:
    return _BY_TIER[SkillTier.parse(tier)]


def tier_rank(tier: SkillTier | str) -> int:
    """Fixed 1–7 ordinal of *tier*."""
    return get_tier_definition(tier).rank


def tier_satisfies(granted: SkillTier | str, minimum: SkillTier | str) -> bool:
    """``True`` when *granted* is at least as high as *minimum*."""
    return tier_rank(granted) >= tier_rank(minimum)


__all__ = [
    "SKILL_XP_MAX",
    "SKILL_XP_MIN",
    "TIER_DEFINITIONS",
    "SkillTier",
    "TierDefinition",
    "clamp_xp",
    "get_tier_definition",
    "resolve_tier",
    "tier_rank",
    "tier_satisfies",
]
