"""Application scheduling – SchedulingSaga.

Coordinates a schedule proposal coming from a workspace with the
organization's governance decision::

    proposed ──approve──▶ confirmed   (ScheduleAssigned per assignee)
        │      └─mismatch─▶ proposed  (ScheduleAssignRejected, nothing else)
        ├──reject───▶ rejected        (ScheduleAssignRejected)
        └──cancel───▶ cancelled       (ScheduleProposalCancelled)

Candidate checks read the eligible-member projection only; the XP aggregate
is never consulted.  Terminal proposals are left alone: every command on
them returns a ``noop`` outcome and publishes nothing.

Status transitions run in a store transaction that re-reads the proposal,
so two governance decisions racing on one proposal cannot both win; the
loser observes the terminal status on its retry and becomes a no-op.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Awaitable, Iterable

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from governance_core.application.events import EventBus, Unsubscribe
from governance_core.application.projections import EligibleMemberPort, EligibleMemberView
from governance_core.application.scheduling.proposal import (
    ApprovalOutcome,
    ScheduleProposal,
    proposal_path,
)
from governance_core.application.scheduling.state import ProposalStatus
from governance_core.application.store import DocumentStore, Transaction
from governance_core.kernel.errors import (
    ConcurrencyConflictError,
    NotFoundError,
    ValidationError,
)
from governance_core.kernel.events import (
    EventEnvelope,
    EventType,
    ScheduleAssigned,
    ScheduleAssignRejected,
    ScheduleProposalCancelled,
    ScheduleProposed,
)
from governance_core.kernel.skills import tier_satisfies
from governance_core.kernel.time import Clock, SystemClock
from governance_core.observability.logging import get_logger

logger = get_logger(__name__)

_TRANSITION_ATTEMPTS = 3


def _candidate_tuple(candidate_ids: Iterable[str]) -> tuple[str, ...]:
    if isinstance(candidate_ids, str):
        candidate_ids = (candidate_ids,)
    candidates = tuple(dict.fromkeys(c for c in candidate_ids if c))
    if not candidates:
        raise ValidationError(
            "approval needs at least one candidate",
            errors=[{"field": "candidateIds", "reason": "must not be empty"}],
        )
    return candidates


class SchedulingSaga:
    """Owns ``scheduleProposals/{proposalId}`` and the governance decision."""

    def __init__(
        self,
        store: DocumentStore,
        members: EligibleMemberPort,
        bus: EventBus,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._members = members
        self._bus = bus
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def register(self, workspace_bus: EventBus) -> Unsubscribe:
        """Start a saga for every ``ScheduleProposed`` on *workspace_bus*."""
        return workspace_bus.subscribe(EventType.SCHEDULE_PROPOSED, self._on_proposed)

    def _on_proposed(self, envelope: EventEnvelope) -> Awaitable[ScheduleProposal]:
        match envelope.payload:
            case ScheduleProposed() as payload:
                return self.propose(payload)
            case _:
                raise TypeError(
                    f"saga cannot start from {type(envelope.payload).__name__}"
                )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def propose(self, payload: ScheduleProposed) -> ScheduleProposal:
        """Record a proposal in ``proposed``; a repeated id returns the stored one."""
        path = proposal_path(payload.proposal_id)
        received_at = self._clock.now().isoformat()

        async def create(tx: Transaction) -> tuple[ScheduleProposal, bool]:
            raw = await tx.get(path)
            if raw is not None:
                return ScheduleProposal.from_record(raw), False
            proposal = ScheduleProposal.from_event(payload, received_at)
            tx.set(path, proposal.to_record())
            return proposal, True

        proposal, created = await self._transact(create)
        if created:
            logger.info(
                "schedule_proposal_received",
                proposal_id=proposal.proposal_id,
                context_id=proposal.context_id,
                workspace_id=proposal.workspace_id,
                requirements=len(proposal.skill_requirements),
            )
        return proposal

    async def approve(
        self,
        proposal_id: str,
        candidate_ids: Iterable[str],
        *,
        approved_by: str,
    ) -> ApprovalOutcome:
        """Assign *candidate_ids* when they cover every skill requirement.

        Raises :class:`~governance_core.kernel.errors.ValidationError` for an
        empty candidate set and :class:`~governance_core.kernel.errors.NotFoundError`
        for an unknown proposal.  A requirement mismatch is not an error: it
        publishes ``ScheduleAssignRejected`` and returns ``outcome="rejected"``
        with the proposal still ``proposed``.
        """
        candidates = _candidate_tuple(candidate_ids)
        proposal = await self.get_proposal(proposal_id)
        if proposal.status.terminal:
            return self._noop(proposal, "approve")

        reason = await self._requirement_gap(proposal, candidates)
        if reason is not None:
            self._bus.publish(
                EventType.SCHEDULE_ASSIGN_REJECTED,
                ScheduleAssignRejected(proposal_id=proposal_id, reason=reason),
                source_id=proposal_id,
            )
            logger.info(
                "schedule_assignment_rejected",
                proposal_id=proposal_id,
                candidates=list(candidates),
                reason=reason,
            )
            return ApprovalOutcome(
                proposal_id=proposal_id,
                outcome="rejected",
                status=proposal.status,
                reason=reason,
            )

        confirmed = await self._transition(
            proposal_id,
            ProposalStatus.CONFIRMED,
            decided_by=approved_by,
            assigned_to=candidates,
        )
        if confirmed is None:
            return self._noop(await self.get_proposal(proposal_id), "approve")

        for subject_id in candidates:
            await self._members.set_eligible(confirmed.context_id, subject_id, False)
        for subject_id in candidates:
            self._bus.publish(
                EventType.SCHEDULE_ASSIGNED,
                ScheduleAssigned(
                    proposal_id=proposal_id,
                    workspace_id=confirmed.workspace_id,
                    context_id=confirmed.context_id,
                    subject_id=subject_id,
                    assigned_by=approved_by,
                    title=confirmed.title,
                    start_date=confirmed.start_date,
                    end_date=confirmed.end_date,
                ),
                source_id=proposal_id,
            )
        logger.info(
            "schedule_proposal_confirmed",
            proposal_id=proposal_id,
            assigned=list(candidates),
            approved_by=approved_by,
        )
        return ApprovalOutcome(
            proposal_id=proposal_id,
            outcome="confirmed",
            status=ProposalStatus.CONFIRMED,
            assigned=candidates,
        )

    async def reject(
        self, proposal_id: str, *, reason: str, rejected_by: str
    ) -> ApprovalOutcome:
        """Turn the proposal down and tell the workspace why."""
        if not reason:
            raise ValidationError(
                "a rejection needs a reason",
                errors=[{"field": "reason", "reason": "must not be empty"}],
            )
        rejected = await self._transition(
            proposal_id, ProposalStatus.REJECTED, decided_by=rejected_by, reason=reason
        )
        if rejected is None:
            return self._noop(await self.get_proposal(proposal_id), "reject")
        self._bus.publish(
            EventType.SCHEDULE_ASSIGN_REJECTED,
            ScheduleAssignRejected(proposal_id=proposal_id, reason=reason),
            source_id=proposal_id,
        )
        logger.info(
            "schedule_proposal_rejected",
            proposal_id=proposal_id,
            rejected_by=rejected_by,
            reason=reason,
        )
        return ApprovalOutcome(
            proposal_id=proposal_id,
            outcome="rejected",
            status=ProposalStatus.REJECTED,
            reason=reason,
        )

    async def cancel(
        self,
        proposal_id: str,
        *,
        cancelled_by: str,
        reason: str | None = None,
    ) -> ApprovalOutcome:
        """Withdraw the proposal; no projection is touched."""
        cancelled = await self._transition(
            proposal_id, ProposalStatus.CANCELLED, decided_by=cancelled_by, reason=reason
        )
        if cancelled is None:
            return self._noop(await self.get_proposal(proposal_id), "cancel")
        self._bus.publish(
            EventType.SCHEDULE_PROPOSAL_CANCELLED,
            ScheduleProposalCancelled(
                proposal_id=proposal_id,
                context_id=cancelled.context_id,
                workspace_id=cancelled.workspace_id,
                cancelled_by=cancelled_by,
                reason=reason,
            ),
            source_id=proposal_id,
        )
        logger.info(
            "schedule_proposal_cancelled",
            proposal_id=proposal_id,
            cancelled_by=cancelled_by,
        )
        return ApprovalOutcome(
            proposal_id=proposal_id,
            outcome="cancelled",
            status=ProposalStatus.CANCELLED,
            reason=reason,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def find_proposal(self, proposal_id: str) -> ScheduleProposal | None:
        raw = await self._store.get(proposal_path(proposal_id))
        return ScheduleProposal.from_record(raw) if raw is not None else None

    async def get_proposal(self, proposal_id: str) -> ScheduleProposal:
        proposal = await self.find_proposal(proposal_id)
        if proposal is None:
            raise NotFoundError("ScheduleProposal", proposal_id)
        return proposal

    async def list_proposals(
        self,
        context_id: str | None = None,
        *,
        status: ProposalStatus | None = None,
    ) -> list[ScheduleProposal]:
        proposals = [
            ScheduleProposal.from_record(record)
            for _, record in await self._store.list("scheduleProposals")
        ]
        if context_id is not None:
            proposals = [p for p in proposals if p.context_id == context_id]
        if status is not None:
            proposals = [p for p in proposals if p.status is status]
        return proposals

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _requirement_gap(
        self, proposal: ScheduleProposal, candidates: tuple[str, ...]
    ) -> str | None:
        """Describe the first requirement the candidates cannot cover, or ``None``."""
        views: dict[str, EligibleMemberView | None] = {
            subject_id: await self._members.get_entry(proposal.context_id, subject_id)
            for subject_id in candidates
        }
        missing = [s for s, view in views.items() if view is None]
        if missing:
            return f"not members of {proposal.context_id}: {', '.join(missing)}"
        busy = [s for s, view in views.items() if view is not None and not view.eligible]
        if busy:
            return f"already assigned elsewhere: {', '.join(busy)}"

        for requirement in proposal.skill_requirements:
            qualified = [
                s
                for s, view in views.items()
                if view is not None
                and tier_satisfies(
                    view.standing(requirement.skill_id).tier, requirement.minimum_tier
                )
            ]
            if len(qualified) < requirement.quantity:
                return (
                    f"skill {requirement.skill_id} needs {requirement.quantity} "
                    f"at {requirement.minimum_tier.value} or above, "
                    f"{len(qualified)} of {len(candidates)} candidates qualify"
                )
        return None

    async def _transition(
        self, proposal_id: str, status: ProposalStatus, **changes: Any
    ) -> ScheduleProposal | None:
        """Move a non-terminal proposal to *status*; ``None`` when already terminal."""
        path = proposal_path(proposal_id)
        decided_at = self._clock.now().isoformat()

        async def move(tx: Transaction) -> ScheduleProposal | None:
            raw = await tx.get(path)
            if raw is None:
                raise NotFoundError("ScheduleProposal", proposal_id)
            current = ScheduleProposal.from_record(raw)
            if current.status.terminal:
                return None
            updated = dataclasses.replace(
                current, status=status, decided_at=decided_at, **changes
            )
            tx.set(path, updated.to_record())
            return updated

        return await self._transact(move)

    async def _transact(self, fn: Any) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(_TRANSITION_ATTEMPTS),
            retry=retry_if_exception_type(ConcurrencyConflictError),
            reraise=True,
        ):
            with attempt:
                return await self._store.run_transaction(fn)
        raise AssertionError("unreachable")

    @staticmethod
    def _noop(proposal: ScheduleProposal, command: str) -> ApprovalOutcome:
        logger.info(
            "schedule_proposal_terminal",
            proposal_id=proposal.proposal_id,
            status=proposal.status,
            command=command,
        )
        return ApprovalOutcome(
            proposal_id=proposal.proposal_id,
            outcome="noop",
            status=proposal.status,
        )


__all__ = ["SchedulingSaga"]
