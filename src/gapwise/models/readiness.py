"""Project snapshot and certification-readiness models."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .maturity import ScoredItem
from .soa import SoAEntry
from .timestamps import Timestamp

ActionPlanStatus = Literal[
    "planned", "in_progress", "completed", "verified", "effective", "ineffective"
]

PENDING_ACTION_STATUSES = ("planned", "in_progress")


class ReadinessBand(str, Enum):
    READY = "ready"
    NEAR = "near"
    NOT_READY = "not_ready"


class ActionPlan(BaseModel):
    id: str
    title: str = ""
    status: ActionPlanStatus = "planned"
    due_date: Optional[Timestamp] = None

    @property
    def pending(self) -> bool:
        return self.status in PENDING_ACTION_STATUSES


class ProjectSnapshot(BaseModel):
    """Read-only view of one project as supplied by the persistence layer."""

    id: str
    name: str = ""
    target_maturity: Optional[int] = Field(default=None, strict=True, ge=0, le=4)
    requirements: list[ScoredItem] = []
    controls: list[ScoredItem] = []
    soa: list[SoAEntry] = []
    open_nonconformities: int = Field(default=0, strict=True, ge=0)
    action_plans: list[ActionPlan] = []

    @property
    def items(self) -> list[ScoredItem]:
        return [*self.requirements, *self.controls]


class ReadinessReport(BaseModel):
    project_id: str
    project_name: str = ""
    requirement_compliance: float = 0.0
    control_compliance: float = 0.0
    open_ncs: int = 0
    pending_actions: int = 0
    overdue_items: int = 0
    nc_penalty: int = 100
    overdue_penalty: int = 100
    readiness_score: int = 0
    readiness_band: ReadinessBand = ReadinessBand.NOT_READY


class ProjectComparison(BaseModel):
    id: str
    name: str = ""
    compliance: int = 0
    avg_maturity: float = 0.0
    open_ncs: int = 0
    pending_actions: int = 0
