# qms_core/tests/test_workflow_scenarios.py
"""
End-to-end status flows as the mutation handlers drive them.
"""

from __future__ import annotations

import pytest
from django.core.exceptions import PermissionDenied
from django.http import Http404

from qms_core.workflows import (
    InvalidTransitionError,
    UnknownStateError,
    get_allowed_transitions,
    validate_transition,
)


# ==================================================
# DOCUMENTS
# ==================================================

def test_document_approval_flow():
    validate_transition("documentStatus", "DRAFT", "IN_REVIEW")
    validate_transition("documentStatus", "IN_REVIEW", "APPROVED")
    validate_transition("documentStatus", "APPROVED", "ARCHIVED")


def test_document_cannot_skip_review():
    with pytest.raises(InvalidTransitionError) as exc:
        validate_transition("documentStatus", "DRAFT", "APPROVED")

    err = exc.value
    assert err.machine_id == "documentStatus"
    assert err.current_state == "DRAFT"
    assert err.requested_state == "APPROVED"
    assert err.allowed == ["IN_REVIEW"]
    assert str(err).startswith("Cannot transition documentStatus from DRAFT to APPROVED")


def test_document_changes_requested_and_re_review():
    validate_transition("documentStatus", "IN_REVIEW", "DRAFT")
    validate_transition("documentStatus", "APPROVED", "IN_REVIEW")
    validate_transition("documentStatus", "APPROVED", "DRAFT")


def test_archived_document_is_locked():
    with pytest.raises(InvalidTransitionError) as exc:
        validate_transition("documentStatus", "ARCHIVED", "DRAFT")
    assert exc.value.allowed == []
    assert "allowed: none" in str(exc.value)


# ==================================================
# DECLARATIONS OF CONFORMITY
# ==================================================

def test_doc_expiry_path():
    assert "EXPIRING" in get_allowed_transitions("docStatus", "VALID")
    assert get_allowed_transitions("docStatus", "EXPIRED") == []


def test_doc_review_and_renewal():
    validate_transition("docStatus", "MISSING", "IN_REVIEW")
    validate_transition("docStatus", "IN_REVIEW", "VALID")
    validate_transition("docStatus", "EXPIRING", "VALID")

    with pytest.raises(InvalidTransitionError):
        validate_transition("docStatus", "EXPIRED", "VALID")


# ==================================================
# TASKS
# ==================================================

def test_task_completion_is_terminal():
    validate_transition("taskStatus", "OPEN", "DONE")
    with pytest.raises(InvalidTransitionError):
        validate_transition("taskStatus", "DONE", "OPEN")


def test_task_can_be_cancelled_while_in_progress():
    validate_transition("taskStatus", "OPEN", "IN_PROGRESS")
    validate_transition("taskStatus", "IN_PROGRESS", "CANCELLED")

    with pytest.raises(InvalidTransitionError):
        validate_transition("taskStatus", "IN_PROGRESS", "OPEN")


# ==================================================
# TRAINING
# ==================================================

def test_training_request_lifecycle():
    validate_transition("trainingRequestStatus", "REQUESTED", "APPROVED")
    validate_transition("trainingRequestStatus", "APPROVED", "PLANNED")
    validate_transition("trainingRequestStatus", "PLANNED", "COMPLETED")


def test_rejected_training_request_cannot_be_approved():
    validate_transition("trainingRequestStatus", "REQUESTED", "REJECTED")
    with pytest.raises(InvalidTransitionError):
        validate_transition("trainingRequestStatus", "REJECTED", "APPROVED")


def test_session_must_be_held_before_closing():
    with pytest.raises(InvalidTransitionError):
        validate_transition("sessionStatus", "PLANNED", "CLOSED")
    validate_transition("sessionStatus", "PLANNED", "HELD")
    validate_transition("sessionStatus", "HELD", "CLOSED")


def test_participant_effectiveness_flow():
    steps = [
        ("INVITED", "ATTENDED"),
        ("ATTENDED", "FEEDBACK_PENDING"),
        ("FEEDBACK_PENDING", "FEEDBACK_DONE"),
        ("FEEDBACK_DONE", "EFFECTIVENESS_PENDING"),
        ("EFFECTIVENESS_PENDING", "INEFFECTIVE"),
        ("INEFFECTIVE", "REQUIRES_ACTION"),
    ]
    for current, target in steps:
        validate_transition("participantStatus", current, target)

    with pytest.raises(InvalidTransitionError):
        validate_transition("participantStatus", "NO_SHOW", "ATTENDED")


# ==================================================
# PEER REVIEW
# ==================================================

def test_review_decision_is_final():
    validate_transition("reviewStatus", "PENDING", "CHANGES_REQUESTED")
    with pytest.raises(InvalidTransitionError):
        validate_transition("reviewStatus", "CHANGES_REQUESTED", "APPROVED")


# ==================================================
# ERROR KINDS
# ==================================================

def test_unknown_state_is_a_distinct_invalid_transition():
    with pytest.raises(UnknownStateError) as exc:
        validate_transition("taskStatus", "NOT_A_REAL_STATE", "DONE")

    assert isinstance(exc.value, InvalidTransitionError)
    assert exc.value.state == "NOT_A_REAL_STATE"
    assert exc.value.current_state == "NOT_A_REAL_STATE"
    assert exc.value.requested_state == "DONE"

    with pytest.raises(UnknownStateError) as exc:
        validate_transition("taskStatus", "OPEN", "ARCHIVED")
    assert exc.value.state == "ARCHIVED"


def test_transition_errors_are_not_permission_or_not_found_errors():
    with pytest.raises(InvalidTransitionError) as exc:
        validate_transition("taskStatus", "DONE", "OPEN")

    assert not isinstance(exc.value, PermissionDenied)
    assert not isinstance(exc.value, PermissionError)
    assert not isinstance(exc.value, Http404)
    # Callers written against ValueError keep working
    assert isinstance(exc.value, ValueError)
