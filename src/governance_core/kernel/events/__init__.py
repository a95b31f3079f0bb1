"""Kernel events – catalogue of event kinds, payloads and the envelope."""
from governance_core.kernel.events.catalog import (
    EVENT_PAYLOADS,
    EventNamespace,
    EventPayload,
    EventType,
    MemberJoined,
    MemberLeft,
    ReleaseOutcome,
    ScheduleAssignRejected,
    ScheduleAssigned,
    ScheduleAssignmentReleased,
    ScheduleProposalCancelled,
    ScheduleProposed,
    SkillRecognitionGranted,
    SkillRecognitionRevoked,
    SkillXpAdded,
    SkillXpChanged,
    SkillXpDeducted,
    payload_type,
)
from governance_core.kernel.events.envelope import EventEnvelope, EventEnvelopeContract

__all__ = [
    "EVENT_PAYLOADS",
    "EventEnvelope",
    "EventEnvelopeContract",
    "EventNamespace",
    "EventPayload",
    "EventType",
    "MemberJoined",
    "MemberLeft",
    "ReleaseOutcome",
    "ScheduleAssignRejected",
    "ScheduleAssigned",
    "ScheduleAssignmentReleased",
    "ScheduleProposalCancelled",
    "ScheduleProposed",
    "SkillRecognitionGranted",
    "SkillRecognitionRevoked",
    "SkillXpAdded",
    "SkillXpChanged",
    "SkillXpDeducted",
    "payload_type",
]
