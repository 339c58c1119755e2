"""Calendar-month trend buckets for dashboard charts.

Buckets are pre-filled with zeros for every month in the window so a month
without activity still shows up as a zero point instead of a missing one.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Union

from ..models.analytics import TrendEvent, TrendRow
from .errors import EngineInputError

PERIOD_MONTHS: dict[str, int] = {"3m": 3, "6m": 6, "12m": 12}
DEFAULT_PERIOD = "6m"

DateLike = Union[date, datetime]


def validate_period(period: str) -> str:
    if not isinstance(period, str) or period not in PERIOD_MONTHS:
        raise EngineInputError(
            "period", period, f"expected one of {', '.join(PERIOD_MONTHS)}"
        )
    return period


def month_key(value: DateLike) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def _shift_months(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def period_start(period: str, now: DateLike) -> date:
    """First day of the month N months before now's month.

    The window also covers now's own month, so "3m" spans four calendar
    months (March to June for a June clock) and "6m" spans seven.
    """
    months = PERIOD_MONTHS[validate_period(period)]
    year, month = _shift_months(now.year, now.month, -months)
    return date(year, month, 1)


def build_buckets(start: DateLike, now: DateLike) -> dict[str, int]:
    """Zero-valued, chronologically ordered month buckets from start to now.

    Both ends are inclusive at month granularity. A start after now gives an
    empty mapping.
    """
    buckets: dict[str, int] = {}
    year, month = start.year, start.month
    while (year, month) <= (now.year, now.month):
        buckets[f"{year:04d}-{month:02d}"] = 0
        year, month = _shift_months(year, month, 1)
    return buckets


def tally(events: Iterable[TrendEvent], buckets: dict[str, int]) -> dict[str, int]:
    """Count events per month into a copy of buckets.

    Events outside the window are dropped; no new keys are ever added.
    """
    result = dict(buckets)
    for event in events:
        key = month_key(event.created_at)
        if key in result:
            result[key] += 1
    return result


def build_trend_rows(
    risks: Iterable[TrendEvent],
    nonconformities: Iterable[TrendEvent],
    actions: Iterable[TrendEvent],
    incidents: Iterable[TrendEvent],
    period: str,
    now: DateLike,
) -> list[TrendRow]:
    """One row per month in the window, all four streams on the same template."""
    template = build_buckets(period_start(period, now), now)
    risks_by_month = tally(risks, template)
    ncs_by_month = tally(nonconformities, template)
    actions_by_month = tally(actions, template)
    incidents_by_month = tally(incidents, template)

    return [
        TrendRow(
            month=month,
            risks=risks_by_month[month],
            ncs=ncs_by_month[month],
            actions=actions_by_month[month],
            incidents=incidents_by_month[month],
        )
        for month in template
    ]
