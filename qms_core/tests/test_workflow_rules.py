# qms_core/tests/test_workflow_rules.py
"""
Structural properties of the canonical rule table.
"""

from __future__ import annotations

import pytest

from qms_core.workflows import (
    RULES,
    InvalidTransitionError,
    UnknownMachineError,
    get_allowed_transitions,
    validate_transition,
)


MACHINE_STATES = [(mid, state) for mid, m in RULES.items() for state in m.states]


def test_all_expected_machines_declared():
    assert set(RULES) == {
        "documentStatus",
        "docStatus",
        "taskStatus",
        "trainingRequestStatus",
        "reviewStatus",
        "sessionStatus",
        "participantStatus",
    }


@pytest.mark.parametrize("machine_id,state", MACHINE_STATES)
def test_allowed_targets_are_declared_states(machine_id, state):
    declared = set(RULES[machine_id].states)
    assert set(get_allowed_transitions(machine_id, state)) <= declared


@pytest.mark.parametrize("machine_id,state", MACHINE_STATES)
def test_allowed_transitions_are_deterministic(machine_id, state):
    first = get_allowed_transitions(machine_id, state)
    second = get_allowed_transitions(machine_id, state)
    assert first == second


@pytest.mark.parametrize(
    "machine_id,state",
    [
        ("documentStatus", "ARCHIVED"),
        ("taskStatus", "DONE"),
        ("taskStatus", "CANCELLED"),
        ("trainingRequestStatus", "REJECTED"),
        ("trainingRequestStatus", "COMPLETED"),
        ("docStatus", "EXPIRED"),
        ("sessionStatus", "CLOSED"),
        ("sessionStatus", "CANCELLED"),
        ("reviewStatus", "APPROVED"),
        ("reviewStatus", "CHANGES_REQUESTED"),
        ("participantStatus", "EFFECTIVE"),
        ("participantStatus", "NO_SHOW"),
        ("participantStatus", "REQUIRES_ACTION"),
    ],
)
def test_terminal_states_have_no_exits(machine_id, state):
    assert get_allowed_transitions(machine_id, state) == []
    assert state in RULES[machine_id].terminal_states


@pytest.mark.parametrize("machine_id,state", MACHINE_STATES)
def test_validator_agrees_with_query(machine_id, state):
    allowed = get_allowed_transitions(machine_id, state)

    for target in RULES[machine_id].states:
        if target in allowed:
            validate_transition(machine_id, state, target)
        else:
            with pytest.raises(InvalidTransitionError):
                validate_transition(machine_id, state, target)


@pytest.mark.parametrize("machine_id,state", MACHINE_STATES)
def test_self_transitions_are_not_implied(machine_id, state):
    with pytest.raises(InvalidTransitionError):
        validate_transition(machine_id, state, state)


def test_unknown_current_state_is_safe():
    assert get_allowed_transitions("taskStatus", "NOT_A_REAL_STATE") == []
    assert get_allowed_transitions("taskStatus", "") == []
    # Lookups are exact; persisted values are upper-case labels
    assert get_allowed_transitions("taskStatus", "open") == []


def test_unknown_machine_fails_loud():
    with pytest.raises(UnknownMachineError) as exc:
        get_allowed_transitions("invoiceStatus", "OPEN")
    assert exc.value.machine_id == "invoiceStatus"
    assert "taskStatus" in exc.value.known

    with pytest.raises(UnknownMachineError):
        validate_transition("invoiceStatus", "OPEN", "DONE")


def test_declaration_order_is_preserved():
    assert get_allowed_transitions("taskStatus", "OPEN") == ["IN_PROGRESS", "DONE", "CANCELLED"]
    assert get_allowed_transitions("documentStatus", "IN_REVIEW") == ["APPROVED", "DRAFT"]


def test_returned_list_is_a_copy():
    allowed = get_allowed_transitions("taskStatus", "OPEN")
    allowed.append("ARCHIVED")
    assert "ARCHIVED" not in get_allowed_transitions("taskStatus", "OPEN")


def test_rule_table_is_read_only():
    with pytest.raises(TypeError):
        RULES["taskStatus"] = RULES["reviewStatus"]  # type: ignore[index]
    with pytest.raises(TypeError):
        RULES["taskStatus"].transitions["DONE"] = ("OPEN",)  # type: ignore[index]


def test_states_are_plain_strings():
    for machine in RULES.values():
        for state, targets in machine.transitions.items():
            assert type(state) is str
            assert all(type(t) is str for t in targets)


def test_unhashable_machine_id_is_unknown():
    with pytest.raises(UnknownMachineError) as exc:
        get_allowed_transitions(["taskStatus"], "OPEN")  # type: ignore[arg-type]
    assert exc.value.machine_id == ["taskStatus"]
    assert "['taskStatus']" in str(exc.value)


def test_machines_are_hashable():
    machines = set(RULES.values())
    assert len(machines) == len(RULES)
    assert RULES["taskStatus"] in machines
    assert hash(RULES["taskStatus"]) == hash(RULES["taskStatus"])
