"""Whole-portfolio input document."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .analytics import Deadline, TrendStreams
from .readiness import ProjectSnapshot
from .soa import StandardControl
from .timestamps import Timestamp


class StandardCatalogue(BaseModel):
    id: str
    code: str = ""
    name: str = ""
    controls: list[StandardControl] = []


class PortfolioSnapshot(BaseModel):
    """Everything the engine reads for one report run.

    `now` pins the clock for the run; when absent the caller supplies it.
    """

    now: Optional[Timestamp] = None
    projects: list[ProjectSnapshot] = []
    standards: list[StandardCatalogue] = []
    events: TrendStreams = TrendStreams()
    deadlines: list[Deadline] = []

    def get_project(self, project_id: str) -> Optional[ProjectSnapshot]:
        return next((p for p in self.projects if p.id == project_id), None)

    def all_controls(self) -> list[StandardControl]:
        return [c for s in self.standards for c in s.controls]
