# qms_core/workflows/expiry.py
"""
Declaration of conformity expiry step.

Decides the automatic docStatus move the daily expiry job applies:
- VALID    -> EXPIRING once valid_until is inside the warning window
- EXPIRING -> EXPIRED  once valid_until has passed

Persistence, warning tasks and notifications stay with the job itself.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from django.conf import settings
from django.utils import timezone

from .machines import DocStatus, Machine
from .validator import TransitionValidator, default_validator

logger = logging.getLogger(__name__)

DEFAULT_WARNING_DAYS = 90


def warning_window() -> timedelta:
    days = getattr(settings, "QMS_DOC_EXPIRY_WARNING_DAYS", DEFAULT_WARNING_DAYS)
    return timedelta(days=int(days))


def _aware(value: Union[date, datetime]) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def next_declaration_status(
    status: str,
    valid_until: Union[date, datetime],
    *,
    now: Optional[datetime] = None,
    window: Optional[timedelta] = None,
    validator: TransitionValidator = default_validator,
) -> Optional[str]:
    """
    Return the docStatus the expiry job should move to, or None if the
    declaration stays where it is. One step per call: a VALID declaration
    that is already past valid_until becomes EXPIRING first.

    A bare date means the start of that day; naive datetimes are read in
    the current time zone.
    """
    valid_until = _aware(valid_until)
    now = _aware(now or timezone.now())
    window = warning_window() if window is None else window

    target: Optional[str] = None
    if status == DocStatus.VALID and valid_until - now <= window:
        target = DocStatus.EXPIRING.value
    elif status == DocStatus.EXPIRING and valid_until <= now:
        target = DocStatus.EXPIRED.value

    if target is None:
        return None

    validator.validate(Machine.DOC_STATUS.value, status, target)
    logger.debug(
        "DoC expiry step %s -> %s (valid_until=%s)",
        status,
        target,
        valid_until.isoformat(),
    )
    return target


__all__ = ["DEFAULT_WARNING_DAYS", "warning_window", "next_declaration_status"]
