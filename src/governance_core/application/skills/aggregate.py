"""Application skills – SkillXpService, the ledger-guarded XP aggregate.

One record per (subject, skill) at ``subjectSkills/{subjectId}/skills/{skillId}``
holding ``xp`` (always within ``[0, 525]``) and a ``version`` counter.  Tier
is never stored.

Write path for :meth:`SkillXpService.add_xp` / :meth:`SkillXpService.deduct_xp`:

1. read the record (``xp=0, version=0`` when absent);
2. ``target = clamp(xp ± delta)``, ``applied = target - xp``;
3. stage a ledger entry carrying ``applied``;
4. stage the record with ``xp=target, version=version+1``;
5. commit, then publish ``SkillXpAdded`` / ``SkillXpDeducted`` with the
   absolute ``newXp``.

Steps 1–4 run in one store transaction.  When a concurrent writer commits
first the transaction fails with ``ConcurrencyConflictError`` and the whole
read-modify-write is retried against the fresh ``version``; the ledger entry
of a failed attempt is never written.  Store outages are not retried.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from governance_core.application.events import EventBus
from governance_core.application.skills.ledger import XpLedger
from governance_core.application.store import DocumentStore, Record, Transaction
from governance_core.kernel.errors import (
    ConcurrencyConflictError,
    InvariantViolationError,
    ValidationError,
)
from governance_core.kernel.events import EventType, SkillXpAdded, SkillXpDeducted
from governance_core.kernel.skills import SKILL_XP_MAX, SKILL_XP_MIN, clamp_xp
from governance_core.kernel.time import Clock
from governance_core.observability.logging import get_logger

logger = get_logger(__name__)


def skill_path(subject_id: str, skill_id: str) -> str:
    return f"subjectSkills/{subject_id}/skills/{skill_id}"


@dataclasses.dataclass(frozen=True)
class SkillXpRecord:
    subject_id: str
    skill_id: str
    xp: int = 0
    version: int = 0

    def to_record(self) -> Record:
        return {
            "subjectId": self.subject_id,
            "skillId": self.skill_id,
            "xp": self.xp,
            "version": self.version,
        }

    @classmethod
    def from_record(cls, record: Record) -> "SkillXpRecord":
        return cls(
            subject_id=record["subjectId"],
            skill_id=record["skillId"],
            xp=record.get("xp", 0),
            version=record.get("version", 0),
        )


@dataclasses.dataclass(frozen=True)
class XpChange:
    new_xp: int
    applied_delta: int


@dataclasses.dataclass(frozen=True)
class XpContext:
    """Where and why an XP change happens."""

    context_id: str
    reason: str | None = None
    source_id: str | None = None


def _validate(subject_id: str, skill_id: str, delta: Any, context: XpContext) -> None:
    errors: list[dict[str, Any]] = []
    if not subject_id:
        errors.append({"field": "subjectId", "reason": "must not be empty"})
    if not skill_id:
        errors.append({"field": "skillId", "reason": "must not be empty"})
    if not context.context_id:
        errors.append({"field": "contextId", "reason": "must not be empty"})
    if isinstance(delta, bool) or not isinstance(delta, int):
        errors.append({"field": "delta", "reason": "must be an integer"})
    elif delta <= 0:
        errors.append({"field": "delta", "reason": "must be positive"})
    if errors:
        raise ValidationError(
            f"invalid XP change for {subject_id!r}/{skill_id!r}: "
            + "; ".join(f"{e['field']} {e['reason']}" for e in errors),
            errors=errors,
        )


class SkillXpService:
    """Owns every XP write.  Readers outside the skill context use projections."""

    def __init__(
        self,
        store: DocumentStore,
        bus: EventBus,
        *,
        ledger: XpLedger | None = None,
        clock: Clock | None = None,
        max_attempts: int = 5,
        retry_wait_seconds: float = 0.0,
    ) -> None:
        if max_attempts < 1:
            raise ValidationError(
                f"max_attempts must be >= 1, got {max_attempts!r}",
                errors=[{"field": "maxAttempts", "reason": "must be >= 1"}],
            )
        self._store = store
        self._bus = bus
        self._ledger = ledger or XpLedger(store, clock)
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait_seconds

    @property
    def ledger(self) -> XpLedger:
        return self._ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def add_xp(
        self, subject_id: str, skill_id: str, delta: int, context: XpContext
    ) -> XpChange:
        """Add *delta* (> 0) XP, clamped at the cap."""
        _validate(subject_id, skill_id, delta, context)
        return await self._change(
            subject_id, skill_id, delta, context, "addXp", EventType.SKILL_XP_ADDED
        )

    async def deduct_xp(
        self, subject_id: str, skill_id: str, delta: int, context: XpContext
    ) -> XpChange:
        """Remove *delta* (> 0) XP, clamped at zero."""
        _validate(subject_id, skill_id, delta, context)
        return await self._change(
            subject_id, skill_id, -delta, context, "deductXp", EventType.SKILL_XP_DEDUCTED
        )

    # ------------------------------------------------------------------
    # Queries (owning context only)
    # ------------------------------------------------------------------

    async def get_record(self, subject_id: str, skill_id: str) -> SkillXpRecord:
        raw = await self._store.get(skill_path(subject_id, skill_id))
        if raw is None:
            return SkillXpRecord(subject_id, skill_id)
        return SkillXpRecord.from_record(raw)

    async def get_xp(self, subject_id: str, skill_id: str) -> int:
        return (await self.get_record(subject_id, skill_id)).xp

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _change(
        self,
        subject_id: str,
        skill_id: str,
        signed_delta: int,
        context: XpContext,
        default_reason: str,
        event_type: EventType,
    ) -> XpChange:
        path = skill_path(subject_id, skill_id)
        reason = context.reason or default_reason

        async def read_modify_write(tx: Transaction) -> XpChange:
            raw = await tx.get(path)
            current = (
                SkillXpRecord.from_record(raw) if raw is not None
                else SkillXpRecord(subject_id, skill_id)
            )
            if not SKILL_XP_MIN <= current.xp <= SKILL_XP_MAX:
                raise InvariantViolationError(
                    f"stored XP {current.xp} for {path} is outside "
                    f"[{SKILL_XP_MIN}, {SKILL_XP_MAX}]",
                    detail={"path": path, "xp": current.xp},
                )
            target = clamp_xp(current.xp + signed_delta)
            applied = target - current.xp
            self._ledger.stage(
                tx,
                self._ledger.entry(subject_id, skill_id, applied, reason, context.source_id),
            )
            tx.set(
                path,
                dataclasses.replace(current, xp=target, version=current.version + 1).to_record(),
            )
            return XpChange(new_xp=target, applied_delta=applied)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._retry_wait),
            retry=retry_if_exception_type(ConcurrencyConflictError),
            before_sleep=self._log_conflict,
            reraise=True,
        ):
            with attempt:
                change = await self._store.run_transaction(read_modify_write)

        payload_cls = SkillXpAdded if event_type is EventType.SKILL_XP_ADDED else SkillXpDeducted
        self._bus.publish(
            event_type,
            payload_cls(
                subject_id=subject_id,
                context_id=context.context_id,
                skill_id=skill_id,
                xp_delta=change.applied_delta,
                new_xp=change.new_xp,
                reason=context.reason,
            ),
            source_id=f"{subject_id}/{skill_id}",
        )
        logger.info(
            "skill_xp_changed",
            subject_id=subject_id,
            skill_id=skill_id,
            applied_delta=change.applied_delta,
            new_xp=change.new_xp,
        )
        return change

    @staticmethod
    def _log_conflict(retry_state: Any) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "xp_conflict_retry",
            attempt=retry_state.attempt_number,
            path=getattr(exc, "path", None),
        )


__all__ = [
    "SkillXpRecord",
    "SkillXpService",
    "XpChange",
    "XpContext",
    "skill_path",
]
