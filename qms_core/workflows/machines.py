# qms_core/workflows/machines.py
"""
Canonical status machines for QMS entities.

Each machine declares:
- its closed state set (a TextChoices enum, reusable as model field choices)
- the ordered next states for every state
- whether rework loops (cycles) are intentional

The rule table is built once at import and is read-only afterwards.
Order of next states is significant: UI renders them as ordered actions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple, Type

from django.db import models


# ===============================================================
# Machine identifiers
# ===============================================================

class Machine(models.TextChoices):
    DOCUMENT_STATUS = "documentStatus", "Document"
    DOC_STATUS = "docStatus", "Declaration of conformity"
    TASK_STATUS = "taskStatus", "Task"
    TRAINING_REQUEST_STATUS = "trainingRequestStatus", "Training request"
    REVIEW_STATUS = "reviewStatus", "Document review"
    SESSION_STATUS = "sessionStatus", "Training session"
    PARTICIPANT_STATUS = "participantStatus", "Session participant"


# ===============================================================
# State enums
# ===============================================================

class DocumentStatus(models.TextChoices):
    DRAFT = "DRAFT"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    ARCHIVED = "ARCHIVED"


class DocStatus(models.TextChoices):
    MISSING = "MISSING"
    IN_REVIEW = "IN_REVIEW"
    VALID = "VALID"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"


class TaskStatus(models.TextChoices):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class TrainingRequestStatus(models.TextChoices):
    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PLANNED = "PLANNED"
    COMPLETED = "COMPLETED"


class ReviewStatus(models.TextChoices):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"


class SessionStatus(models.TextChoices):
    PLANNED = "PLANNED"
    HELD = "HELD"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class ParticipantStatus(models.TextChoices):
    INVITED = "INVITED"
    ATTENDED = "ATTENDED"
    NO_SHOW = "NO_SHOW"
    FEEDBACK_PENDING = "FEEDBACK_PENDING"
    FEEDBACK_DONE = "FEEDBACK_DONE"
    EFFECTIVENESS_PENDING = "EFFECTIVENESS_PENDING"
    EFFECTIVE = "EFFECTIVE"
    INEFFECTIVE = "INEFFECTIVE"
    REQUIRES_ACTION = "REQUIRES_ACTION"


# ===============================================================
# Machine definition
# ===============================================================

@dataclass(frozen=True, eq=False)
class StateMachine:
    """
    One entity kind's status rules.

    `transitions` maps every declared state to the ordered tuple of states
    reachable in one step. Terminal states map to an empty tuple.
    Machines compare and hash by identity.
    """

    machine_id: str
    states: Tuple[str, ...]
    transitions: Mapping[str, Tuple[str, ...]]
    allows_rework: bool = False
    choices: Optional[Type[models.TextChoices]] = field(default=None, compare=False)

    def next_states(self, current: str) -> Tuple[str, ...]:
        return self.transitions.get(current, ())

    def is_terminal(self, state: str) -> bool:
        return state in self.states and not self.next_states(state)

    @property
    def terminal_states(self) -> Tuple[str, ...]:
        return tuple(s for s in self.states if not self.next_states(s))


def build_machine(
    machine_id: str,
    states: Sequence[str],
    edges: Mapping[str, Sequence[str]],
    *,
    allows_rework: bool = False,
    choices: Optional[Type[models.TextChoices]] = None,
) -> StateMachine:
    """
    Freeze a machine definition. Plain strings in, plain strings out, so enum
    members never leak into persisted values or API payloads.
    """
    state_labels = tuple(str(s) for s in states)
    frozen: Dict[str, Tuple[str, ...]] = {
        str(src): tuple(str(t) for t in targets) for src, targets in edges.items()
    }
    for s in state_labels:
        frozen.setdefault(s, ())

    return StateMachine(
        machine_id=str(machine_id),
        states=state_labels,
        transitions=MappingProxyType(frozen),
        allows_rework=allows_rework,
        choices=choices,
    )


def _from_choices(
    machine_id: str,
    choices: Type[models.TextChoices],
    edges: Mapping[models.TextChoices, Sequence[models.TextChoices]],
    *,
    allows_rework: bool = False,
) -> StateMachine:
    return build_machine(
        machine_id,
        [member.value for member in choices],
        {src.value: [t.value for t in targets] for src, targets in edges.items()},
        allows_rework=allows_rework,
        choices=choices,
    )


# ===============================================================
# DOCUMENT CONTROL
# ===============================================================
# IN_REVIEW -> DRAFT is "changes requested"; APPROVED -> IN_REVIEW is a
# periodic re-review; APPROVED -> DRAFT starts a new revision.

DOCUMENT_MACHINE = _from_choices(
    Machine.DOCUMENT_STATUS,
    DocumentStatus,
    {
        DocumentStatus.DRAFT: [DocumentStatus.IN_REVIEW],
        DocumentStatus.IN_REVIEW: [DocumentStatus.APPROVED, DocumentStatus.DRAFT],
        DocumentStatus.APPROVED: [
            DocumentStatus.ARCHIVED,
            DocumentStatus.IN_REVIEW,
            DocumentStatus.DRAFT,
        ],
        DocumentStatus.ARCHIVED: [],
    },
    allows_rework=True,
)


# ===============================================================
# DECLARATION OF CONFORMITY
# ===============================================================
# VALID -> EXPIRING and EXPIRING -> EXPIRED are driven by the expiry job
# (see workflows.expiry). EXPIRING -> VALID is a renewal before expiry.

DOC_MACHINE = _from_choices(
    Machine.DOC_STATUS,
    DocStatus,
    {
        DocStatus.MISSING: [DocStatus.IN_REVIEW],
        DocStatus.IN_REVIEW: [DocStatus.VALID],
        DocStatus.VALID: [DocStatus.EXPIRING],
        DocStatus.EXPIRING: [DocStatus.EXPIRED, DocStatus.VALID],
        DocStatus.EXPIRED: [],
    },
    allows_rework=True,
)


# ===============================================================
# TASKS
# ===============================================================

TASK_MACHINE = _from_choices(
    Machine.TASK_STATUS,
    TaskStatus,
    {
        TaskStatus.OPEN: [TaskStatus.IN_PROGRESS, TaskStatus.DONE, TaskStatus.CANCELLED],
        TaskStatus.IN_PROGRESS: [TaskStatus.DONE, TaskStatus.CANCELLED],
        TaskStatus.DONE: [],
        TaskStatus.CANCELLED: [],
    },
)


# ===============================================================
# TRAINING
# ===============================================================

TRAINING_REQUEST_MACHINE = _from_choices(
    Machine.TRAINING_REQUEST_STATUS,
    TrainingRequestStatus,
    {
        TrainingRequestStatus.REQUESTED: [
            TrainingRequestStatus.APPROVED,
            TrainingRequestStatus.REJECTED,
        ],
        TrainingRequestStatus.APPROVED: [TrainingRequestStatus.PLANNED],
        TrainingRequestStatus.PLANNED: [TrainingRequestStatus.COMPLETED],
        TrainingRequestStatus.REJECTED: [],
        TrainingRequestStatus.COMPLETED: [],
    },
)

SESSION_MACHINE = _from_choices(
    Machine.SESSION_STATUS,
    SessionStatus,
    {
        SessionStatus.PLANNED: [SessionStatus.HELD, SessionStatus.CANCELLED],
        SessionStatus.HELD: [SessionStatus.CLOSED],
        SessionStatus.CLOSED: [],
        SessionStatus.CANCELLED: [],
    },
)

PARTICIPANT_MACHINE = _from_choices(
    Machine.PARTICIPANT_STATUS,
    ParticipantStatus,
    {
        ParticipantStatus.INVITED: [ParticipantStatus.ATTENDED, ParticipantStatus.NO_SHOW],
        ParticipantStatus.ATTENDED: [ParticipantStatus.FEEDBACK_PENDING],
        ParticipantStatus.FEEDBACK_PENDING: [ParticipantStatus.FEEDBACK_DONE],
        ParticipantStatus.FEEDBACK_DONE: [ParticipantStatus.EFFECTIVENESS_PENDING],
        ParticipantStatus.EFFECTIVENESS_PENDING: [
            ParticipantStatus.EFFECTIVE,
            ParticipantStatus.INEFFECTIVE,
        ],
        ParticipantStatus.INEFFECTIVE: [ParticipantStatus.REQUIRES_ACTION],
        ParticipantStatus.EFFECTIVE: [],
        ParticipantStatus.NO_SHOW: [],
        ParticipantStatus.REQUIRES_ACTION: [],
    },
)


# ===============================================================
# DOCUMENT REVIEWS
# ===============================================================

REVIEW_MACHINE = _from_choices(
    Machine.REVIEW_STATUS,
    ReviewStatus,
    {
        ReviewStatus.PENDING: [ReviewStatus.APPROVED, ReviewStatus.CHANGES_REQUESTED],
        ReviewStatus.APPROVED: [],
        ReviewStatus.CHANGES_REQUESTED: [],
    },
)


# ===============================================================
# Rule table
# ===============================================================

RULES: Mapping[str, StateMachine] = MappingProxyType(
    {
        m.machine_id: m
        for m in (
            DOCUMENT_MACHINE,
            DOC_MACHINE,
            TASK_MACHINE,
            TRAINING_REQUEST_MACHINE,
            REVIEW_MACHINE,
            SESSION_MACHINE,
            PARTICIPANT_MACHINE,
        )
    }
)


__all__ = [
    "Machine",
    "DocumentStatus",
    "DocStatus",
    "TaskStatus",
    "TrainingRequestStatus",
    "ReviewStatus",
    "SessionStatus",
    "ParticipantStatus",
    "StateMachine",
    "build_machine",
    "RULES",
]
