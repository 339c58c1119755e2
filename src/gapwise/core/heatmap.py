"""Average control maturity cross-tabulated by (domain, project)."""

from __future__ import annotations

from typing import Iterable, NamedTuple

from ..models.analytics import HeatmapCell, HeatmapControl
from ..models.readiness import ProjectSnapshot
from .aggregator import round_display

# Heatmap-only sentinel; domain grouping elsewhere uses OTHER_DOMAIN.
NO_DOMAIN = "No domain"
DEFAULT_PROJECT_NAME = "Project"


class HeatmapKey(NamedTuple):
    domain: str
    project_id: str


class _Cell:
    __slots__ = ("total", "count", "project_name")

    def __init__(self, project_name: str) -> None:
        self.total = 0
        self.count = 0
        self.project_name = project_name


def build_heatmap(controls: Iterable[HeatmapControl]) -> list[HeatmapCell]:
    """One cell per (domain, project) pair, in first-seen order."""
    cells: dict[HeatmapKey, _Cell] = {}
    for control in controls:
        domain = control.domain if control.domain and control.domain.strip() else NO_DOMAIN
        key = HeatmapKey(domain, control.project_id)
        cell = cells.get(key)
        if cell is None:
            cell = cells[key] = _Cell(control.project_name or DEFAULT_PROJECT_NAME)
        cell.total += control.maturity
        cell.count += 1

    return [
        HeatmapCell(
            domain=key.domain,
            project_id=key.project_id,
            project_name=cell.project_name,
            avg_maturity=round_display(cell.total / cell.count),
        )
        for key, cell in cells.items()
    ]


def heatmap_controls(projects: Iterable[ProjectSnapshot]) -> list[HeatmapControl]:
    """Flatten project control snapshots into heatmap inputs."""
    return [
        HeatmapControl(
            domain=control.domain,
            project_id=project.id,
            project_name=project.name,
            maturity=control.maturity,
        )
        for project in projects
        for control in project.controls
    ]
