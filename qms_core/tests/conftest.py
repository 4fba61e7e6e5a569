# qms_core/tests/conftest.py

from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from qms_core.workflows import TransitionValidator, build_machine


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user_qmb(db):
    User = get_user_model()
    user, _created = User.objects.get_or_create(username="qmb", defaults={"is_staff": False})
    user.set_password("pass123")
    user.save(update_fields=["password"])
    return user


@pytest.fixture
def auth_client(api_client, user_qmb) -> APIClient:
    api_client.force_authenticate(user=user_qmb)
    return api_client


@pytest.fixture
def approval_only_validator() -> TransitionValidator:
    """
    Narrowed table: a single two-step approval machine.
    """
    machine = build_machine(
        "approvalStatus",
        ["PENDING", "APPROVED"],
        {"PENDING": ["APPROVED"]},
    )
    return TransitionValidator({"approvalStatus": machine})
