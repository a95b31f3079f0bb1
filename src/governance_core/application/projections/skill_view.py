"""Application projections – account skill view (subject → skill → xp)."""

from __future__ import annotations

from governance_core.application.projections.eligible_members import SkillStanding
from governance_core.application.store import DocumentStore


def skill_view_collection(subject_id: str) -> str:
    return f"accountSkillView/{subject_id}/skills"


class AccountSkillView:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def apply_skill_xp(
        self, subject_id: str, skill_id: str, new_xp: int, *, read_model_version: int = 0
    ) -> None:
        await self._store.set(
            f"{skill_view_collection(subject_id)}/{skill_id}",
            {
                "subjectId": subject_id,
                "skillId": skill_id,
                "xp": new_xp,
                "readModelVersion": read_model_version,
            },
        )

    async def get_skills(self, subject_id: str) -> dict[str, SkillStanding]:
        return {
            skill_id: SkillStanding.of(record["xp"])
            for skill_id, record in await self._store.list(skill_view_collection(subject_id))
        }


__all__ = ["AccountSkillView", "skill_view_collection"]
