# qms_core/workflows/__init__.py
"""
Authoritative status workflow engine for QMS entities.

Every mutation that changes a status field must call validate_transition()
before persisting. UI code calls get_allowed_transitions() to decide which
actions to offer.

Module-level functions delegate to default_validator. Call sites that need a
narrowed table take a TransitionValidator instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .exceptions import (
    InvalidTransitionError,
    RuleTableError,
    UnknownMachineError,
    UnknownStateError,
    WorkflowError,
)
from .machines import (
    RULES,
    DocStatus,
    DocumentStatus,
    Machine,
    ParticipantStatus,
    ReviewStatus,
    SessionStatus,
    StateMachine,
    TaskStatus,
    TrainingRequestStatus,
    build_machine,
)
from .validator import TransitionValidator, default_validator


# ===============================================================
# Public workflow API
# ===============================================================

def get_allowed_transitions(machine_id: str, current_state: str) -> List[str]:
    """
    Ordered next states for current_state.

    Unknown current_state returns []. Unknown machine_id raises
    UnknownMachineError.
    """
    return default_validator.allowed_transitions(machine_id, current_state)


def validate_transition(machine_id: str, current_state: str, requested_state: str) -> None:
    """
    Raises InvalidTransitionError unless requested_state is a declared next
    state of current_state. Self-transitions are not implied.
    """
    default_validator.validate(machine_id, current_state, requested_state)


def parse_state(machine_id: str, value: str) -> str:
    return default_validator.parse_state(machine_id, value)


def is_terminal(machine_id: str, state: str) -> bool:
    return default_validator.is_terminal(machine_id, state)


def workflow_definition(machine_id: Optional[str] = None) -> Dict[str, Any]:
    return default_validator.definition(machine_id)


__all__ = [
    "RULES",
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
    "TransitionValidator",
    "default_validator",
    "WorkflowError",
    "InvalidTransitionError",
    "UnknownStateError",
    "UnknownMachineError",
    "RuleTableError",
    "get_allowed_transitions",
    "validate_transition",
    "parse_state",
    "is_terminal",
    "workflow_definition",
]
