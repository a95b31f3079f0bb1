"""Application projections – account schedule view.

Assignments per subject at ``accountScheduleView/{subjectId}/items/{proposalId}``
with ``status`` one of ``upcoming``, ``completed`` or ``cancelled``.
"""

from __future__ import annotations

from governance_core.application.store import DocumentStore, Record
from governance_core.kernel.events import ReleaseOutcome, ScheduleAssigned


def schedule_items(subject_id: str) -> str:
    return f"accountScheduleView/{subject_id}/items"


class AccountScheduleView:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def apply_assigned(
        self, assigned: ScheduleAssigned, *, read_model_version: int = 0
    ) -> None:
        await self._store.set(
            f"{schedule_items(assigned.subject_id)}/{assigned.proposal_id}",
            {
                "proposalId": assigned.proposal_id,
                "workspaceId": assigned.workspace_id,
                "contextId": assigned.context_id,
                "title": assigned.title,
                "startDate": assigned.start_date,
                "endDate": assigned.end_date,
                "status": "upcoming",
                "readModelVersion": read_model_version,
            },
        )

    async def apply_released(
        self,
        subject_id: str,
        proposal_id: str,
        outcome: ReleaseOutcome,
        *,
        read_model_version: int = 0,
    ) -> None:
        path = f"{schedule_items(subject_id)}/{proposal_id}"
        if await self._store.get(path) is None:
            return
        await self._store.update(
            path, {"status": outcome.value, "readModelVersion": read_model_version}
        )

    async def get_items(self, subject_id: str, *, status: str | None = None) -> list[Record]:
        items = [record for _, record in await self._store.list(schedule_items(subject_id))]
        if status is not None:
            items = [i for i in items if i["status"] == status]
        return items


__all__ = ["AccountScheduleView", "schedule_items"]
