"""Application notifications – sender port, in-memory fake and event router."""
from governance_core.application.notifications.models import (
    InMemoryNotificationSender,
    Notification,
    NotificationSender,
)
from governance_core.application.notifications.router import NotificationRouter, ProposalReader

__all__ = [
    "InMemoryNotificationSender",
    "Notification",
    "NotificationRouter",
    "NotificationSender",
    "ProposalReader",
]
