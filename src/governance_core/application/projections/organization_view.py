"""Application projections – organization view (member roster).

One record per organization context at ``organizationView/{contextId}``::

    {contextId, memberIds, memberCount, readModelVersion}

``memberIds`` keeps join order and never holds a subject twice, so
re-applying a join or a leave changes nothing.
"""

from __future__ import annotations

import dataclasses

from governance_core.application.store import DocumentStore, Record


def organization_path(context_id: str) -> str:
    return f"organizationView/{context_id}"


@dataclasses.dataclass(frozen=True)
class OrganizationView:
    context_id: str
    member_ids: tuple[str, ...]
    read_model_version: int

    @property
    def member_count(self) -> int:
        return len(self.member_ids)

    @classmethod
    def from_record(cls, record: Record) -> "OrganizationView":
        return cls(
            context_id=record["contextId"],
            member_ids=tuple(record.get("memberIds") or ()),
            read_model_version=record.get("readModelVersion", 0),
        )


class OrganizationViewProjection:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def apply_member_joined(
        self, context_id: str, subject_id: str, *, read_model_version: int = 0
    ) -> None:
        members = await self._member_ids(context_id)
        if subject_id not in members:
            members.append(subject_id)
        await self._write(context_id, members, read_model_version)

    async def apply_member_left(
        self, context_id: str, subject_id: str, *, read_model_version: int = 0
    ) -> None:
        members = [m for m in await self._member_ids(context_id) if m != subject_id]
        await self._write(context_id, members, read_model_version)

    async def get(self, context_id: str) -> OrganizationView | None:
        record = await self._store.get(organization_path(context_id))
        return OrganizationView.from_record(record) if record is not None else None

    async def _member_ids(self, context_id: str) -> list[str]:
        record = await self._store.get(organization_path(context_id))
        return list(record.get("memberIds") or []) if record is not None else []

    async def _write(self, context_id: str, members: list[str], read_model_version: int) -> None:
        await self._store.set(
            organization_path(context_id),
            {
                "contextId": context_id,
                "memberIds": members,
                "memberCount": len(members),
                "readModelVersion": read_model_version,
            },
        )


__all__ = ["OrganizationView", "OrganizationViewProjection", "organization_path"]
