"""Application scheduling – proposal lifecycle between workspaces and governance."""
from governance_core.application.scheduling.proposal import (
    ApprovalOutcome,
    ScheduleProposal,
    proposal_path,
)
from governance_core.application.scheduling.saga import SchedulingSaga
from governance_core.application.scheduling.state import ProposalStatus

__all__ = [
    "ApprovalOutcome",
    "ProposalStatus",
    "ScheduleProposal",
    "SchedulingSaga",
    "proposal_path",
]
