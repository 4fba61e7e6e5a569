# qms_core/workflows/exceptions.py
"""
Workflow engine error taxonomy.

All engine errors derive from WorkflowError. They are raised synchronously
and never caught inside the engine; callers decide how to surface them.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence


class WorkflowError(Exception):
    """Base class for all workflow engine errors."""


class InvalidTransitionError(WorkflowError, ValueError):
    """
    Requested status change is not declared legal for the machine.

    Always caller-recoverable: the caller must not apply the change.
    Retrying with the same inputs always fails.
    """

    def __init__(
        self,
        machine_id: str,
        current_state: str,
        requested_state: str,
        allowed: Sequence[str] = (),
        message: str | None = None,
    ):
        self.machine_id = machine_id
        self.current_state = current_state
        self.requested_state = requested_state
        self.allowed: List[str] = list(allowed)

        if message is None:
            message = (
                f"Cannot transition {machine_id} from {current_state} "
                f"to {requested_state} (allowed: {', '.join(self.allowed) or 'none'})."
            )
        super().__init__(message)


class UnknownStateError(InvalidTransitionError):
    """
    A state label is not part of the machine's declared state set.
    """

    def __init__(
        self,
        machine_id: str,
        state: str,
        *,
        current_state: str | None = None,
        requested_state: str | None = None,
    ):
        self.state = state
        super().__init__(
            machine_id,
            current_state if current_state is not None else state,
            requested_state if requested_state is not None else "",
            message=f"Unknown {machine_id} state: {state!r}",
        )


class UnknownMachineError(WorkflowError, LookupError):
    """
    Machine identifier is not present in the rule table. Indicates a caller bug.
    """

    def __init__(self, machine_id: str, known: Iterable[str] = ()):
        self.machine_id = machine_id
        self.known = sorted(known)
        hint = f" (known: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown workflow machine: {machine_id!r}{hint}")


class RuleTableError(WorkflowError):
    """
    A rule table violates the structural invariants of the engine.
    """

    def __init__(self, problems: Sequence[str]):
        self.problems = list(problems)
        super().__init__(
            "Invalid workflow rule table: " + "; ".join(self.problems)
        )


__all__ = [
    "WorkflowError",
    "InvalidTransitionError",
    "UnknownStateError",
    "UnknownMachineError",
    "RuleTableError",
]
