"""Kernel events – the closed catalogue of event kinds and their payloads.

Every :class:`EventType` member is bound to exactly one frozen payload
dataclass.  The binding is checked when this module is imported, so an
event kind without a payload shape cannot exist at runtime.

Wire shapes use camelCase keys (``subjectId``, ``newXp``); optional fields
are omitted from :meth:`EventPayload.to_dict` when unset.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, ClassVar

from governance_core.kernel.errors import ValidationError
from governance_core.kernel.skills import SKILL_XP_MAX, SKILL_XP_MIN, SkillRequirement


class EventNamespace(enum.Enum):
    WORKSPACE = "workspace"
    ORGANIZATION = "organization"


class EventType(enum.Enum):
    """Namespaced event names."""

    SCHEDULE_PROPOSED = "workspace:schedule:proposed"
    SCHEDULE_ASSIGNED = "organization:schedule:assigned"
    SCHEDULE_ASSIGN_REJECTED = "organization:schedule:assignRejected"
    SCHEDULE_PROPOSAL_CANCELLED = "organization:schedule:proposalCancelled"
    SCHEDULE_ASSIGNMENT_RELEASED = "organization:schedule:released"
    MEMBER_JOINED = "organization:member:joined"
    MEMBER_LEFT = "organization:member:left"
    SKILL_XP_ADDED = "organization:skill:xpAdded"
    SKILL_XP_DEDUCTED = "organization:skill:xpDeducted"
    SKILL_RECOGNITION_GRANTED = "organization:skill:recognitionGranted"
    SKILL_RECOGNITION_REVOKED = "organization:skill:recognitionRevoked"

    @property
    def namespace(self) -> EventNamespace:
        return EventNamespace(self.value.split(":", 1)[0])

    @classmethod
    def in_namespace(cls, namespace: EventNamespace) -> tuple["EventType", ...]:
        return tuple(t for t in cls if t.namespace is namespace)


def _wire_key(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclasses.dataclass(frozen=True)
class EventPayload:
    """Base class for event payloads; subclasses set ``event_type``."""

    event_type: ClassVar[EventType]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[_wire_key(f.name)] = self._encode(value)
        return out

    @staticmethod
    def _encode(value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, SkillRequirement):
            return value.to_dict()
        if isinstance(value, tuple):
            return [EventPayload._encode(v) for v in value]
        return value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EventPayload":
        kwargs: dict[str, Any] = {}
        missing: list[str] = []
        for f in dataclasses.fields(cls):
            key = _wire_key(f.name)
            if key in data:
                kwargs[f.name] = data[key]
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                missing.append(key)
        if missing:
            raise ValidationError(
                f"{cls.__name__} payload is missing {', '.join(missing)}",
                errors=[{"field": m, "reason": "required"} for m in missing],
            )
        return cls(**kwargs)


def _require_text(payload: EventPayload, *names: str) -> None:
    empty = [n for n in names if not getattr(payload, n)]
    if empty:
        raise ValidationError(
            f"{type(payload).__name__}: {', '.join(empty)} must not be empty",
            errors=[{"field": _wire_key(n), "reason": "must not be empty"} for n in empty],
        )


# ---------------------------------------------------------------------------
# Skill XP
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class SkillXpChanged(EventPayload):
    subject_id: str
    context_id: str
    skill_id: str
    xp_delta: int
    new_xp: int
    reason: str | None = None

    def __post_init__(self) -> None:
        _require_text(self, "subject_id", "context_id", "skill_id")
        if not SKILL_XP_MIN <= self.new_xp <= SKILL_XP_MAX:
            raise ValidationError(
                f"newXp {self.new_xp} outside [{SKILL_XP_MIN}, {SKILL_XP_MAX}]",
                errors=[{"field": "newXp", "reason": "out of range"}],
            )


@dataclasses.dataclass(frozen=True)
class SkillXpAdded(SkillXpChanged):
    event_type: ClassVar[EventType] = EventType.SKILL_XP_ADDED


@dataclasses.dataclass(frozen=True)
class SkillXpDeducted(SkillXpChanged):
    event_type: ClassVar[EventType] = EventType.SKILL_XP_DEDUCTED


# ---------------------------------------------------------------------------
# Skill recognition
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class SkillRecognitionGranted(EventPayload):
    """An organization acknowledges a member's skill; XP and eligibility are unaffected."""

    event_type: ClassVar[EventType] = EventType.SKILL_RECOGNITION_GRANTED

    context_id: str
    subject_id: str
    skill_id: str
    granted_by: str
    min_xp_required: int = 0

    def __post_init__(self) -> None:
        _require_text(self, "context_id", "subject_id", "skill_id", "granted_by")
        if not SKILL_XP_MIN <= self.min_xp_required <= SKILL_XP_MAX:
            raise ValidationError(
                f"minXpRequired {self.min_xp_required} outside [{SKILL_XP_MIN}, {SKILL_XP_MAX}]",
                errors=[{"field": "minXpRequired", "reason": "out of range"}],
            )


@dataclasses.dataclass(frozen=True)
class SkillRecognitionRevoked(EventPayload):
    event_type: ClassVar[EventType] = EventType.SKILL_RECOGNITION_REVOKED

    context_id: str
    subject_id: str
    skill_id: str
    revoked_by: str

    def __post_init__(self) -> None:
        _require_text(self, "context_id", "subject_id", "skill_id", "revoked_by")


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class _MembershipChanged(EventPayload):
    context_id: str
    subject_id: str

    def __post_init__(self) -> None:
        _require_text(self, "context_id", "subject_id")


@dataclasses.dataclass(frozen=True)
class MemberJoined(_MembershipChanged):
    event_type: ClassVar[EventType] = EventType.MEMBER_JOINED


@dataclasses.dataclass(frozen=True)
class MemberLeft(_MembershipChanged):
    event_type: ClassVar[EventType] = EventType.MEMBER_LEFT


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class ScheduleProposed(EventPayload):
    event_type: ClassVar[EventType] = EventType.SCHEDULE_PROPOSED

    proposal_id: str
    workspace_id: str
    context_id: str
    title: str
    start_date: str
    end_date: str
    proposed_by: str
    skill_requirements: tuple[SkillRequirement, ...] = ()

    def __post_init__(self) -> None:
        _require_text(self, "proposal_id", "workspace_id", "context_id", "proposed_by")
        requirements = tuple(
            r if isinstance(r, SkillRequirement) else SkillRequirement.from_dict(r)
            for r in self.skill_requirements
        )
        object.__setattr__(self, "skill_requirements", requirements)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out.setdefault("skillRequirements", [])
        return out


@dataclasses.dataclass(frozen=True)
class ScheduleAssigned(EventPayload):
    """Confirmation of an approved proposal for one assignee."""

    event_type: ClassVar[EventType] = EventType.SCHEDULE_ASSIGNED

    proposal_id: str
    workspace_id: str
    context_id: str
    subject_id: str
    assigned_by: str
    title: str
    start_date: str
    end_date: str


@dataclasses.dataclass(frozen=True)
class ScheduleAssignRejected(EventPayload):
    """Compensating event: the proposed assignment did not go through."""

    event_type: ClassVar[EventType] = EventType.SCHEDULE_ASSIGN_REJECTED

    proposal_id: str
    reason: str


@dataclasses.dataclass(frozen=True)
class ScheduleProposalCancelled(EventPayload):
    event_type: ClassVar[EventType] = EventType.SCHEDULE_PROPOSAL_CANCELLED

    proposal_id: str
    context_id: str
    workspace_id: str
    cancelled_by: str
    reason: str | None = None


class ReleaseOutcome(enum.Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclasses.dataclass(frozen=True)
class ScheduleAssignmentReleased(EventPayload):
    """An assignment finished or was called off; the assignee is free again."""

    event_type: ClassVar[EventType] = EventType.SCHEDULE_ASSIGNMENT_RELEASED

    proposal_id: str
    context_id: str
    subject_id: str
    outcome: ReleaseOutcome = ReleaseOutcome.COMPLETED

    def __post_init__(self) -> None:
        _require_text(self, "proposal_id", "context_id", "subject_id")
        try:
            object.__setattr__(self, "outcome", ReleaseOutcome(self.outcome))
        except ValueError as exc:
            raise ValidationError(
                f"unknown release outcome {self.outcome!r}",
                errors=[{"field": "outcome", "reason": "unknown value"}],
            ) from exc


EVENT_PAYLOADS: dict[EventType, type[EventPayload]] = {
    cls.event_type: cls
    for cls in (
        ScheduleProposed,
        ScheduleAssigned,
        ScheduleAssignRejected,
        ScheduleProposalCancelled,
        ScheduleAssignmentReleased,
        MemberJoined,
        MemberLeft,
        SkillXpAdded,
        SkillXpDeducted,
        SkillRecognitionGranted,
        SkillRecognitionRevoked,
    )
}

_unbound = set(EventType) - set(EVENT_PAYLOADS)
if _unbound:  # pragma: no cover - guards edits to the catalogue
    raise RuntimeError(f"event types without a payload: {sorted(t.value for t in _unbound)}")


def payload_type(event_type: EventType) -> type[EventPayload]:
    """Return the payload class bound to *event_type*."""
    return EVENT_PAYLOADS[event_type]


__all__ = [
    "EVENT_PAYLOADS",
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
