"""Application projections – Eligible-Member view.

Per-context read model of who may be scheduled and at which proficiency::

    eligibleMemberView/{contextId}/members/{subjectId}
        {contextId, subjectId, skills: {skillId: {xp}}, eligible, readModelVersion}

This is the only data the scheduling saga may consult.  It is eventually
consistent with the XP aggregate: between an aggregate commit and the
funnel applying the resulting event, readers see the previous ``xp``.  The
same holds for ``eligible`` between an assignment and its projection
update.  Tier is computed when an entry is read and never written back.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol

from governance_core.application.store import DocumentStore, Record
from governance_core.kernel.skills import SkillTier, resolve_tier
from governance_core.observability.logging import get_logger

logger = get_logger(__name__)


def member_path(context_id: str, subject_id: str) -> str:
    return f"eligibleMemberView/{context_id}/members/{subject_id}"


def members_collection(context_id: str) -> str:
    return f"eligibleMemberView/{context_id}/members"


@dataclasses.dataclass(frozen=True)
class SkillStanding:
    xp: int
    tier: SkillTier

    @classmethod
    def of(cls, xp: int) -> "SkillStanding":
        return cls(xp=xp, tier=resolve_tier(xp))


@dataclasses.dataclass(frozen=True)
class EligibleMemberView:
    context_id: str
    subject_id: str
    skills: dict[str, SkillStanding]
    eligible: bool
    read_model_version: int

    def standing(self, skill_id: str) -> SkillStanding:
        """Standing for *skill_id*; a skill never earned counts as 0 XP."""
        return self.skills.get(skill_id) or SkillStanding.of(0)

    @classmethod
    def from_record(cls, record: Record) -> "EligibleMemberView":
        return cls(
            context_id=record["contextId"],
            subject_id=record["subjectId"],
            skills={
                skill_id: SkillStanding.of(entry.get("xp", 0))
                for skill_id, entry in (record.get("skills") or {}).items()
            },
            eligible=record.get("eligible", True),
            read_model_version=record.get("readModelVersion", 0),
        )


class EligibleMemberReader(Protocol):
    """Read-only surface of the projection (what scheduling depends on)."""

    async def get_entry(self, context_id: str, subject_id: str) -> EligibleMemberView | None: ...

    async def list_members(
        self, context_id: str, *, eligible_only: bool = True
    ) -> list[EligibleMemberView]: ...


class EligibilityWriter(Protocol):
    """Availability flag only; skills and membership stay with the funnel."""

    async def set_eligible(
        self,
        context_id: str,
        subject_id: str,
        eligible: bool,
        *,
        read_model_version: int | None = None,
    ) -> bool: ...


class EligibleMemberPort(EligibleMemberReader, EligibilityWriter, Protocol):
    """What the scheduling saga needs from the projection."""


class EligibleMemberProjection:
    """Apply functions are pure in (stored entry, arguments) and idempotent."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------

    async def init_entry(
        self, context_id: str, subject_id: str, *, read_model_version: int = 0
    ) -> None:
        path = member_path(context_id, subject_id)
        if await self._store.get(path) is not None:
            await self._store.update(path, {"readModelVersion": read_model_version})
            return
        await self._store.set(
            path,
            {
                "contextId": context_id,
                "subjectId": subject_id,
                "skills": {},
                "eligible": True,
                "readModelVersion": read_model_version,
            },
        )

    async def remove_entry(self, context_id: str, subject_id: str) -> None:
        await self._store.delete(member_path(context_id, subject_id))

    async def apply_skill_xp(
        self,
        context_id: str,
        subject_id: str,
        skill_id: str,
        new_xp: int,
        *,
        read_model_version: int = 0,
    ) -> None:
        """Overwrite the XP of one skill; ``eligible`` is left untouched.

        The ``skills`` map is written back whole so skill ids may contain dots.
        """
        path = member_path(context_id, subject_id)
        record = await self._store.get(path)
        if record is not None:
            skills = dict(record.get("skills") or {})
            skills[skill_id] = {"xp": new_xp}
            await self._store.update(
                path, {"skills": skills, "readModelVersion": read_model_version}
            )
            return
        await self._store.set(
            path,
            {
                "contextId": context_id,
                "subjectId": subject_id,
                "skills": {skill_id: {"xp": new_xp}},
                "eligible": True,
                "readModelVersion": read_model_version,
            },
        )

    async def set_eligible(
        self,
        context_id: str,
        subject_id: str,
        eligible: bool,
        *,
        read_model_version: int | None = None,
    ) -> bool:
        """Flip availability; returns ``False`` when the subject has no entry.

        ``read_model_version`` is left as stored when not given.
        """
        path = member_path(context_id, subject_id)
        if await self._store.get(path) is None:
            logger.warning(
                "eligibility_update_skipped",
                context_id=context_id,
                subject_id=subject_id,
                eligible=eligible,
            )
            return False
        partial: Record = {"eligible": eligible}
        if read_model_version is not None:
            partial["readModelVersion"] = read_model_version
        await self._store.update(path, partial)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_entry(self, context_id: str, subject_id: str) -> EligibleMemberView | None:
        record = await self._store.get(member_path(context_id, subject_id))
        return EligibleMemberView.from_record(record) if record is not None else None

    async def list_members(
        self, context_id: str, *, eligible_only: bool = True
    ) -> list[EligibleMemberView]:
        views = [
            EligibleMemberView.from_record(record)
            for _, record in await self._store.list(members_collection(context_id))
        ]
        if eligible_only:
            views = [v for v in views if v.eligible]
        return views


__all__ = [
    "EligibilityWriter",
    "EligibleMemberPort",
    "EligibleMemberProjection",
    "EligibleMemberReader",
    "EligibleMemberView",
    "SkillStanding",
    "member_path",
    "members_collection",
]
