"""Application skills – XpLedger, the append-only audit trail of XP changes.

Entries live at ``subjectSkills/{subjectId}/xpLedger/{entryId}`` and are
never updated or deleted.  ``delta`` is the change actually applied to the
aggregate after clamping, so summing a subject/skill's deltas from zero in
timestamp order reproduces the aggregate's ``xp``.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any

from governance_core.application.store import DocumentStore, Record, Transaction
from governance_core.kernel.time import Clock, SystemClock


def ledger_collection(subject_id: str) -> str:
    return f"subjectSkills/{subject_id}/xpLedger"


@dataclasses.dataclass(frozen=True)
class XpLedgerEntry:
    subject_id: str
    skill_id: str
    delta: int
    reason: str
    timestamp: datetime
    source_id: str | None = None

    def to_record(self) -> Record:
        record: dict[str, Any] = {
            "subjectId": self.subject_id,
            "skillId": self.skill_id,
            "delta": self.delta,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.source_id is not None:
            record["sourceId"] = self.source_id
        return record

    @classmethod
    def from_record(cls, record: Record) -> "XpLedgerEntry":
        return cls(
            subject_id=record["subjectId"],
            skill_id=record["skillId"],
            delta=record["delta"],
            reason=record["reason"],
            timestamp=datetime.fromisoformat(record["timestamp"]),
            source_id=record.get("sourceId"),
        )


class XpLedger:
    """Reads and writes ledger entries.

    Writers stage entries inside the same transaction as the aggregate
    write (:meth:`stage`), issued *before* the aggregate ``set`` so the
    commit applies them in that order.
    """

    def __init__(self, store: DocumentStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    def entry(
        self,
        subject_id: str,
        skill_id: str,
        delta: int,
        reason: str,
        source_id: str | None = None,
    ) -> XpLedgerEntry:
        return XpLedgerEntry(
            subject_id=subject_id,
            skill_id=skill_id,
            delta=delta,
            reason=reason,
            timestamp=self._clock.now(),
            source_id=source_id,
        )

    def stage(self, tx: Transaction, entry: XpLedgerEntry) -> str:
        """Stage *entry* in *tx*; return the generated entry id."""
        return tx.add(ledger_collection(entry.subject_id), entry.to_record())

    async def append(self, entry: XpLedgerEntry) -> str:
        """Write *entry* outside any transaction (manual corrections, imports)."""
        return await self._store.add(ledger_collection(entry.subject_id), entry.to_record())

    async def entries(self, subject_id: str, skill_id: str | None = None) -> list[XpLedgerEntry]:
        """Entries of *subject_id* (optionally one skill) in timestamp order."""
        rows = await self._store.list(ledger_collection(subject_id))
        entries = [XpLedgerEntry.from_record(record) for _, record in rows]
        if skill_id is not None:
            entries = [e for e in entries if e.skill_id == skill_id]
        return sorted(entries, key=lambda e: e.timestamp)

    async def replay(self, subject_id: str, skill_id: str) -> int:
        """XP reconstructed by summing the ledger from zero."""
        return sum(e.delta for e in await self.entries(subject_id, skill_id))


__all__ = ["XpLedger", "XpLedgerEntry", "ledger_collection"]
