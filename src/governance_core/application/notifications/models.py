"""Application notifications – notification model and sender port."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "InMemoryNotificationSender",
    "Notification",
    "NotificationSender",
]


@dataclass
class Notification:
    """A message addressed to one subject."""

    recipient_id: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class NotificationSender(Protocol):
    """Port: deliver notifications to people (push, mail, in-app feed)."""

    async def send(self, notification: Notification) -> None: ...


class InMemoryNotificationSender:
    """Fake NotificationSender that captures sent notifications."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    def for_recipient(self, recipient_id: str) -> list[Notification]:
        return [n for n in self.sent if n.recipient_id == recipient_id]

    def reset(self) -> None:
        self.sent.clear()

    @property
    def count(self) -> int:
        return len(self.sent)
