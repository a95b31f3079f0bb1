"""Application skills – ledger-guarded XP aggregate."""
from governance_core.application.skills.aggregate import (
    SkillXpRecord,
    SkillXpService,
    XpChange,
    XpContext,
    skill_path,
)
from governance_core.application.skills.ledger import XpLedger, XpLedgerEntry, ledger_collection

__all__ = [
    "SkillXpRecord",
    "SkillXpService",
    "XpChange",
    "XpContext",
    "XpLedger",
    "XpLedgerEntry",
    "ledger_collection",
    "skill_path",
]
