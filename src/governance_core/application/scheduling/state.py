"""Application scheduling – ProposalStatus enum."""

from __future__ import annotations

import enum


class ProposalStatus(enum.Enum):
    """Lifecycle of a schedule proposal."""

    PROPOSED = "proposed"
    """Received from a workspace, awaiting a governance decision."""

    CONFIRMED = "confirmed"
    """Approved; the assignees were marked unavailable."""

    CANCELLED = "cancelled"
    """Withdrawn before a decision."""

    REJECTED = "rejected"
    """Turned down by governance."""

    @property
    def terminal(self) -> bool:
        return self is not ProposalStatus.PROPOSED


__all__ = ["ProposalStatus"]
