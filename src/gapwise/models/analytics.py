"""Dashboard analytics models: trends, heatmap, upcoming deadlines."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .timestamps import Timestamp

Period = Literal["3m", "6m", "12m"]


class TrendEvent(BaseModel):
    """Any timestamped record; only the creation time is read."""

    created_at: Timestamp


class TrendStreams(BaseModel):
    risks: list[TrendEvent] = []
    nonconformities: list[TrendEvent] = []
    actions: list[TrendEvent] = []
    incidents: list[TrendEvent] = []


class TrendRow(BaseModel):
    month: str
    risks: int = 0
    ncs: int = 0
    actions: int = 0
    incidents: int = 0


class HeatmapControl(BaseModel):
    domain: Optional[str] = None
    project_id: str
    project_name: Optional[str] = None
    maturity: int = Field(strict=True, ge=0, le=4)


class HeatmapCell(BaseModel):
    domain: str
    project_id: str
    project_name: str
    avg_maturity: float


DeadlineKind = Literal["action", "audit", "review", "risk_review"]


class Deadline(BaseModel):
    """A dated obligation: action due date, audit start, document or risk review."""

    kind: DeadlineKind
    id: str
    title: str = ""
    due_date: Timestamp
    project_name: Optional[str] = None


class Expiration(BaseModel):
    kind: DeadlineKind
    id: str
    title: str = ""
    due_date: Timestamp
    days_until: int
    project_name: Optional[str] = None
