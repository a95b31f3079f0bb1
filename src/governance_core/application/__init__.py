"""Application – buses, aggregates, projections and the scheduling saga."""

from governance_core.application.bootstrap import GovernanceScope, configure_observability
from governance_core.application.events import EventBus
from governance_core.application.notifications import NotificationRouter
from governance_core.application.projections import EventJournal, ProjectionFunnel
from governance_core.application.scheduling import ApprovalOutcome, ProposalStatus, SchedulingSaga
from governance_core.application.skills import SkillXpService, XpContext
from governance_core.application.store import DocumentStore, InMemoryDocumentStore

__all__ = [
    "ApprovalOutcome",
    "DocumentStore",
    "EventBus",
    "EventJournal",
    "GovernanceScope",
    "InMemoryDocumentStore",
    "NotificationRouter",
    "ProjectionFunnel",
    "ProposalStatus",
    "SchedulingSaga",
    "SkillXpService",
    "XpContext",
    "configure_observability",
]
