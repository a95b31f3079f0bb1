"""Kernel skills – SkillRequirement value object."""
from __future__ import annotations

import dataclasses
from typing import Any

from governance_core.kernel.errors import ValidationError
from governance_core.kernel.skills.tier import SkillTier


@dataclasses.dataclass(frozen=True)
class SkillRequirement:
    """A staffing need inside a schedule proposal.

    ``quantity`` people holding ``skill_id`` at ``minimum_tier`` or above.
    """

    skill_id: str
    minimum_tier: SkillTier
    quantity: int = 1

    def __post_init__(self) -> None:
        if not self.skill_id:
            raise ValidationError(
                "skill requirement needs a skill id",
                errors=[{"field": "skillId", "reason": "must not be empty"}],
            )
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError(
                f"skill requirement quantity must be a positive integer, got {self.quantity!r}",
                errors=[{"field": "quantity", "reason": "must be >= 1"}],
            )
        object.__setattr__(self, "minimum_tier", SkillTier.parse(self.minimum_tier))

    def to_dict(self) -> dict[str, Any]:
        return {
            "skillId": self.skill_id,
            "minimumTier": self.minimum_tier.value,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillRequirement":
        try:
            return cls(
                skill_id=data["skillId"],
                minimum_tier=data["minimumTier"],
                quantity=data.get("quantity", 1),
            )
        except KeyError as exc:
            raise ValidationError(
                f"skill requirement is missing {exc.args[0]!r}",
                errors=[{"field": exc.args[0], "reason": "required"}],
            ) from exc


__all__ = ["SkillRequirement"]
