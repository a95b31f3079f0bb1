"""Application projections – read models, funnel and journal."""
from governance_core.application.projections.eligible_members import (
    EligibilityWriter,
    EligibleMemberPort,
    EligibleMemberProjection,
    EligibleMemberReader,
    EligibleMemberView,
    SkillStanding,
    member_path,
)
from governance_core.application.projections.funnel import (
    ACCOUNT_SCHEDULE_VIEW,
    ACCOUNT_SKILL_VIEW,
    ELIGIBLE_MEMBER_VIEW,
    ORGANIZATION_VIEW,
    SCHEDULE_PROPOSALS,
    SKILL_RECOGNITION,
    ProjectionFunnel,
    Route,
)
from governance_core.application.projections.journal import (
    EventJournal,
    journal_collection,
    rebuild_projections,
)
from governance_core.application.projections.organization_view import (
    OrganizationView,
    OrganizationViewProjection,
    organization_path,
)
from governance_core.application.projections.schedule_view import AccountScheduleView
from governance_core.application.projections.skill_view import AccountSkillView
from governance_core.application.projections.versions import (
    ProjectionVersion,
    ProjectionVersionRegistry,
)

__all__ = [
    "ACCOUNT_SCHEDULE_VIEW",
    "ACCOUNT_SKILL_VIEW",
    "ELIGIBLE_MEMBER_VIEW",
    "ORGANIZATION_VIEW",
    "SCHEDULE_PROPOSALS",
    "SKILL_RECOGNITION",
    "AccountScheduleView",
    "AccountSkillView",
    "EligibilityWriter",
    "EligibleMemberPort",
    "EligibleMemberProjection",
    "EligibleMemberReader",
    "EligibleMemberView",
    "EventJournal",
    "OrganizationView",
    "OrganizationViewProjection",
    "ProjectionFunnel",
    "ProjectionVersion",
    "ProjectionVersionRegistry",
    "Route",
    "SkillStanding",
    "journal_collection",
    "member_path",
    "organization_path",
    "rebuild_projections",
]
