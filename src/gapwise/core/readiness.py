"""Certification-readiness scoring.

The score is a weighted blend of four 0-100 terms:

    readiness = 0.40 * requirement compliance
              + 0.30 * control compliance
              + 0.15 * nonconformity penalty term
              + 0.15 * overdue-action penalty term

rounded half-up and clamped to 0-100.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable

from ..models.readiness import (
    ActionPlan,
    ProjectComparison,
    ProjectSnapshot,
    ReadinessBand,
    ReadinessReport,
)
from ..models.timestamps import to_naive_utc
from .aggregator import average, compliance_percentage, round_display
from .errors import EngineInputError, validate_count

# Compliance terms carry 70% of the weight: they measure the actual maturity of
# requirements and controls.
REQUIREMENT_WEIGHT = 0.40
CONTROL_WEIGHT = 0.30

# Penalty terms carry 15% each. They degrade the score for unresolved findings
# and missed deadlines but cannot zero it out unless compliance is also low.
NC_WEIGHT = 0.15
OVERDUE_WEIGHT = 0.15

# Points lost from a penalty term per open nonconformity / overdue action.
NC_PENALTY_STEP = 15
OVERDUE_PENALTY_STEP = 20

MIN_SCORE = 0
MAX_SCORE = 100

# Gauge bands: 80+ is ready for the audit, 60-79 is close.
READY_THRESHOLD = 80
NEAR_THRESHOLD = 60


def nc_penalty(open_ncs: int) -> int:
    """100 with no open nonconformities, minus 15 per open one, floored at 0."""
    open_ncs = validate_count(open_ncs, "open_ncs")
    if open_ncs == 0:
        return MAX_SCORE
    return max(0, MAX_SCORE - open_ncs * NC_PENALTY_STEP)


def overdue_penalty(overdue_items: int) -> int:
    """100 with nothing overdue, minus 20 per overdue action, floored at 0."""
    overdue_items = validate_count(overdue_items, "overdue_items")
    if overdue_items == 0:
        return MAX_SCORE
    return max(0, MAX_SCORE - overdue_items * OVERDUE_PENALTY_STEP)


def _check_percentage(value: float, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise EngineInputError(field, value, "expected a finite number")
    return float(value)


def readiness_score(
    requirement_compliance: float,
    control_compliance: float,
    open_ncs: int,
    overdue_items: int,
) -> int:
    requirement_compliance = _check_percentage(requirement_compliance, "requirement_compliance")
    control_compliance = _check_percentage(control_compliance, "control_compliance")

    raw = (
        requirement_compliance * REQUIREMENT_WEIGHT
        + control_compliance * CONTROL_WEIGHT
        + nc_penalty(open_ncs) * NC_WEIGHT
        + overdue_penalty(overdue_items) * OVERDUE_WEIGHT
    )
    score = int(round_display(raw, 0))
    # Out-of-range compliance input must not leak outside the scale.
    return max(MIN_SCORE, min(MAX_SCORE, score))


def readiness_band(score: int) -> ReadinessBand:
    if score >= READY_THRESHOLD:
        return ReadinessBand.READY
    if score >= NEAR_THRESHOLD:
        return ReadinessBand.NEAR
    return ReadinessBand.NOT_READY


def count_pending(action_plans: Iterable[ActionPlan]) -> int:
    return sum(1 for a in action_plans if a.pending)


def count_overdue(action_plans: Iterable[ActionPlan], now: datetime) -> int:
    """Pending action plans whose due date is already past."""
    now = to_naive_utc(now)
    return sum(
        1 for a in action_plans
        if a.pending and a.due_date is not None and a.due_date < now
    )


def score_project(project: ProjectSnapshot, now: datetime) -> ReadinessReport:
    req_compliance = compliance_percentage(project.requirements)
    ctrl_compliance = compliance_percentage(project.controls)
    open_ncs = project.open_nonconformities
    overdue = count_overdue(project.action_plans, now)
    score = readiness_score(req_compliance, ctrl_compliance, open_ncs, overdue)

    return ReadinessReport(
        project_id=project.id,
        project_name=project.name,
        requirement_compliance=round_display(req_compliance),
        control_compliance=round_display(ctrl_compliance),
        open_ncs=open_ncs,
        pending_actions=count_pending(project.action_plans),
        overdue_items=overdue,
        nc_penalty=nc_penalty(open_ncs),
        overdue_penalty=overdue_penalty(overdue),
        readiness_score=score,
        readiness_band=readiness_band(score),
    )


def compare_projects(projects: Iterable[ProjectSnapshot]) -> list[ProjectComparison]:
    """Side-by-side compliance and maturity for the project comparison chart."""
    result: list[ProjectComparison] = []
    for project in projects:
        items = project.items
        compliance = compliance_percentage(items)
        result.append(ProjectComparison(
            id=project.id,
            name=project.name,
            compliance=int(round_display(compliance, 0)),
            avg_maturity=round_display(average(items)),
            open_ncs=project.open_nonconformities,
            pending_actions=count_pending(project.action_plans),
        ))
    return result
