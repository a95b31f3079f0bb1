"""Application scheduling – ScheduleProposal record and ApprovalOutcome."""

from __future__ import annotations

import dataclasses
from typing import Any

from governance_core.application.scheduling.state import ProposalStatus
from governance_core.application.store import Record
from governance_core.kernel.events import ScheduleProposed
from governance_core.kernel.skills import SkillRequirement


def proposal_path(proposal_id: str) -> str:
    return f"scheduleProposals/{proposal_id}"


@dataclasses.dataclass(frozen=True)
class ScheduleProposal:
    proposal_id: str
    workspace_id: str
    context_id: str
    title: str
    start_date: str
    end_date: str
    proposed_by: str
    skill_requirements: tuple[SkillRequirement, ...] = ()
    status: ProposalStatus = ProposalStatus.PROPOSED
    assigned_to: tuple[str, ...] = ()
    decided_by: str | None = None
    decided_at: str | None = None
    reason: str | None = None
    received_at: str | None = None

    @classmethod
    def from_event(cls, event: ScheduleProposed, received_at: str) -> "ScheduleProposal":
        return cls(
            proposal_id=event.proposal_id,
            workspace_id=event.workspace_id,
            context_id=event.context_id,
            title=event.title,
            start_date=event.start_date,
            end_date=event.end_date,
            proposed_by=event.proposed_by,
            skill_requirements=event.skill_requirements,
            received_at=received_at,
        )

    def to_record(self) -> Record:
        return {
            "proposalId": self.proposal_id,
            "workspaceId": self.workspace_id,
            "contextId": self.context_id,
            "title": self.title,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "proposedBy": self.proposed_by,
            "skillRequirements": [r.to_dict() for r in self.skill_requirements],
            "status": self.status.value,
            "assignedTo": list(self.assigned_to),
            "decidedBy": self.decided_by,
            "decidedAt": self.decided_at,
            "reason": self.reason,
            "receivedAt": self.received_at,
        }

    @classmethod
    def from_record(cls, record: Record) -> "ScheduleProposal":
        return cls(
            proposal_id=record["proposalId"],
            workspace_id=record["workspaceId"],
            context_id=record["contextId"],
            title=record["title"],
            start_date=record["startDate"],
            end_date=record["endDate"],
            proposed_by=record["proposedBy"],
            skill_requirements=tuple(
                SkillRequirement.from_dict(r) for r in record.get("skillRequirements", [])
            ),
            status=ProposalStatus(record["status"]),
            assigned_to=tuple(record.get("assignedTo", [])),
            decided_by=record.get("decidedBy"),
            decided_at=record.get("decidedAt"),
            reason=record.get("reason"),
            received_at=record.get("receivedAt"),
        )


@dataclasses.dataclass(frozen=True)
class ApprovalOutcome:
    """Result of a saga command.

    ``outcome`` is ``"confirmed"``, ``"rejected"``, ``"cancelled"`` or
    ``"noop"`` (the proposal was already terminal; nothing was published).
    A skill mismatch comes back as ``outcome="rejected"`` with ``status``
    still ``PROPOSED``.
    """

    proposal_id: str
    outcome: str
    status: ProposalStatus
    reason: str | None = None
    assigned: tuple[str, ...] = ()

    @property
    def noop(self) -> bool:
        return self.outcome == "noop"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "proposalId": self.proposal_id,
            "outcome": self.outcome,
            "status": self.status.value,
        }
        if self.reason is not None:
            out["reason"] = self.reason
        if self.assigned:
            out["assigned"] = list(self.assigned)
        return out


__all__ = ["ApprovalOutcome", "ScheduleProposal", "proposal_path"]
