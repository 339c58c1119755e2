"""Upcoming and overdue deadlines for the dashboard expirations panel."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable

from ..models.analytics import Deadline, Expiration
from ..models.timestamps import to_naive_utc
from .errors import validate_count

DEFAULT_HORIZON_DAYS = 30

_SECONDS_PER_DAY = 24 * 60 * 60


def is_due(deadline: Deadline, now: datetime, horizon: datetime) -> bool:
    """Whether a deadline belongs on the panel.

    Actions and audits show once they fall inside the horizon, overdue ones
    included. Document reviews show only while upcoming. Risk reviews show
    only once they are overdue.
    """
    if deadline.kind in ("action", "audit"):
        return deadline.due_date <= horizon
    if deadline.kind == "review":
        return now <= deadline.due_date <= horizon
    return deadline.due_date < now


def days_until(due_date: datetime, now: datetime) -> int:
    """Whole days remaining, rounded up; negative when overdue."""
    delta = to_naive_utc(due_date) - to_naive_utc(now)
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def build_expirations(
    deadlines: Iterable[Deadline],
    now: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> list[Expiration]:
    now = to_naive_utc(now)
    horizon = now + timedelta(days=validate_count(horizon_days, "horizon_days"))
    result = [
        Expiration(
            kind=d.kind,
            id=d.id,
            title=d.title,
            due_date=d.due_date,
            days_until=days_until(d.due_date, now),
            project_name=d.project_name,
        )
        for d in deadlines
        if is_due(d, now, horizon)
    ]
    result.sort(key=lambda e: (e.days_until, e.title))
    return result
