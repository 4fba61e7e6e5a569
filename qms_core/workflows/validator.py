# qms_core/workflows/validator.py
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import (
    InvalidTransitionError,
    RuleTableError,
    UnknownMachineError,
    UnknownStateError,
)
from .integrity import check_rules
from .machines import RULES, Machine, StateMachine


class TransitionValidator:
    """
    Stateless guard over a read-only rule table.

    The default instance uses the canonical RULES. Pass a narrowed table to
    test call sites in isolation; injected tables are integrity-checked.

    Never performs I/O, never logs. Callers persist the new status only after
    validate() returns, and must make that write conditional on the status
    they read (filter(pk=..., status=current).update(...)) or lock the row.
    """

    def __init__(self, rules: Optional[Mapping[str, StateMachine]] = None):
        if rules is None:
            rules = RULES
        else:
            problems = check_rules(rules)
            if problems:
                raise RuleTableError(problems)
        self._rules: Mapping[str, StateMachine] = MappingProxyType(dict(rules))

    # -----------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------

    @property
    def machine_ids(self) -> Tuple[str, ...]:
        return tuple(self._rules)

    def machine(self, machine_id: str) -> StateMachine:
        try:
            return self._rules[machine_id]
        except (KeyError, TypeError):
            raise UnknownMachineError(machine_id, self._rules) from None

    def parse_state(self, machine_id: str, value: str) -> str:
        """
        Checked parse of a raw status string into the machine's state enum.
        Raises UnknownStateError for labels outside the machine's state set.
        """
        machine = self.machine(machine_id)
        if value not in machine.states:
            raise UnknownStateError(machine.machine_id, value)
        if machine.choices is not None:
            return machine.choices(value)
        return value

    # -----------------------------------------------------------
    # Public operations
    # -----------------------------------------------------------

    def allowed_transitions(self, machine_id: str, current_state: str) -> List[str]:
        """
        Next states in declaration order. Unknown current_state yields [].
        """
        return list(self.machine(machine_id).next_states(current_state))

    def validate(self, machine_id: str, current_state: str, requested_state: str) -> None:
        machine = self.machine(machine_id)

        for label in (current_state, requested_state):
            if label not in machine.states:
                raise UnknownStateError(
                    machine.machine_id,
                    label,
                    current_state=current_state,
                    requested_state=requested_state,
                )

        allowed = machine.next_states(current_state)
        if requested_state not in allowed:
            raise InvalidTransitionError(
                machine.machine_id,
                current_state,
                requested_state,
                allowed,
            )

    def is_allowed(self, machine_id: str, current_state: str, requested_state: str) -> bool:
        return requested_state in self.machine(machine_id).next_states(current_state)

    def is_terminal(self, machine_id: str, state: str) -> bool:
        return self.machine(machine_id).is_terminal(state)

    def definition(self, machine_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Stable JSON-serializable definition for UI and API.
        """
        def _one(m: StateMachine) -> Dict[str, Any]:
            return {
                "machine": m.machine_id,
                "label": _machine_label(m.machine_id),
                "states": list(m.states),
                "transitions": {s: list(m.next_states(s)) for s in m.states},
                "terminal_states": list(m.terminal_states),
                "allows_rework": m.allows_rework,
            }

        if machine_id is None:
            return {mid: _one(m) for mid, m in self._rules.items()}
        return _one(self.machine(machine_id))


def _machine_label(machine_id: str) -> str:
    try:
        return str(Machine(machine_id).label)
    except ValueError:
        return machine_id


default_validator = TransitionValidator()


__all__ = ["TransitionValidator", "default_validator"]
