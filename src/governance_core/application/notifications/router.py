"""Application notifications – NotificationRouter.

Turns organization scheduling events into notifications:

* ``ScheduleAssigned`` → the assignee;
* ``ScheduleAssignRejected`` and ``ScheduleProposalCancelled`` → whoever
  proposed the schedule, looked up through a :class:`ProposalReader`.

Delivery runs in the bus's detached handler tasks.  A failing sender is
logged and never reaches the publisher.
"""

from __future__ import annotations

from typing import Awaitable, Protocol

from governance_core.application.events import EventBus, Unsubscribe
from governance_core.application.notifications.models import Notification, NotificationSender
from governance_core.application.scheduling import ScheduleProposal
from governance_core.kernel.events import (
    EventEnvelope,
    EventType,
    ScheduleAssigned,
    ScheduleAssignRejected,
    ScheduleProposalCancelled,
)
from governance_core.observability.logging import get_logger

logger = get_logger(__name__)


def _unexpected(envelope: EventEnvelope) -> TypeError:
    return TypeError(
        f"no notification for {envelope.event_type.value} carrying "
        f"{type(envelope.payload).__name__}"
    )


class ProposalReader(Protocol):
    async def find_proposal(self, proposal_id: str) -> ScheduleProposal | None: ...


class NotificationRouter:
    def __init__(self, sender: NotificationSender, proposals: ProposalReader) -> None:
        self._sender = sender
        self._proposals = proposals

    def attach(self, bus: EventBus) -> Unsubscribe:
        unsubscribers = [
            bus.subscribe(EventType.SCHEDULE_ASSIGNED, self._on_assigned),
            bus.subscribe(EventType.SCHEDULE_ASSIGN_REJECTED, self._on_rejected),
            bus.subscribe(EventType.SCHEDULE_PROPOSAL_CANCELLED, self._on_cancelled),
        ]

        def detach() -> None:
            for unsubscribe in unsubscribers:
                unsubscribe()

        return detach

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_assigned(self, envelope: EventEnvelope) -> Awaitable[None]:
        match envelope.payload:
            case ScheduleAssigned() as payload:
                return self._deliver(
                    Notification(
                        recipient_id=payload.subject_id,
                        title="New assignment",
                        body=f"You are scheduled for {payload.title} "
                        f"({payload.start_date} to {payload.end_date}).",
                        data={
                            "eventType": envelope.event_type.value,
                            "proposalId": payload.proposal_id,
                            "workspaceId": payload.workspace_id,
                        },
                    )
                )
            case _:
                raise _unexpected(envelope)

    def _on_rejected(self, envelope: EventEnvelope) -> Awaitable[None]:
        match envelope.payload:
            case ScheduleAssignRejected() as payload:
                return self._notify_proposer(
                    envelope,
                    payload.proposal_id,
                    title="Schedule not approved",
                    reason=payload.reason,
                )
            case _:
                raise _unexpected(envelope)

    def _on_cancelled(self, envelope: EventEnvelope) -> Awaitable[None]:
        match envelope.payload:
            case ScheduleProposalCancelled() as payload:
                return self._notify_proposer(
                    envelope,
                    payload.proposal_id,
                    title="Schedule cancelled",
                    reason=payload.reason,
                )
            case _:
                raise _unexpected(envelope)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _notify_proposer(
        self,
        envelope: EventEnvelope,
        proposal_id: str,
        *,
        title: str,
        reason: str | None,
    ) -> None:
        proposal = await self._proposals.find_proposal(proposal_id)
        if proposal is None:
            logger.warning(
                "notification_recipient_unknown",
                event_type=envelope.event_type,
                proposal_id=proposal_id,
            )
            return
        body = f"{proposal.title}: {reason}" if reason else proposal.title
        await self._deliver(
            Notification(
                recipient_id=proposal.proposed_by,
                title=title,
                body=body,
                data={
                    "eventType": envelope.event_type.value,
                    "proposalId": proposal_id,
                    "workspaceId": proposal.workspace_id,
                },
            )
        )

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self._sender.send(notification)
        except Exception:
            logger.exception(
                "notification_delivery_failed",
                recipient_id=notification.recipient_id,
                title=notification.title,
            )
            return
        logger.debug(
            "notification_sent",
            recipient_id=notification.recipient_id,
            title=notification.title,
        )


__all__ = ["NotificationRouter", "ProposalReader"]
