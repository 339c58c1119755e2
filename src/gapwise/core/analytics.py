"""Report composition over a portfolio snapshot.

Each dashboard section is computed independently: an input error in one
section is reported in place of that section and does not prevent the others
from being returned.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import ValidationError

from ..models.gap import GapReport
from ..models.readiness import ProjectSnapshot
from ..models.snapshot import PortfolioSnapshot
from ..models.soa import SoAEntry, SoAReport
from ..models.timestamps import to_naive_utc
from .config import DEFAULT_CONFIG
from .errors import EngineInputError
from .expirations import build_expirations
from .gaps import build_gap_report
from .heatmap import build_heatmap, heatmap_controls
from .readiness import compare_projects, score_project
from .soa import build_soa_report, generate_missing
from .trends import build_trend_rows

SECTIONS = ("trends", "project_comparison", "maturity_heatmap", "certification_readiness", "expirations")


def _dump(result: Any) -> Any:
    if isinstance(result, list):
        return [r.model_dump(mode="json") for r in result]
    return result.model_dump(mode="json")


def run_section(builder: Callable[[], Any]) -> Any:
    """Run one section builder, turning input errors into an error payload."""
    try:
        return _dump(builder())
    except (EngineInputError, ValidationError) as e:
        return {"error": str(e)}


def resolve_target_maturity(project: ProjectSnapshot, config: Optional[dict] = None) -> int:
    config = config or DEFAULT_CONFIG
    if project.target_maturity is not None:
        return project.target_maturity
    return config["gap"]["default_target_maturity"]


def build_project_gap_report(project: ProjectSnapshot, config: Optional[dict] = None) -> GapReport:
    config = config or DEFAULT_CONFIG
    return build_gap_report(
        project.items,
        resolve_target_maturity(project, config),
        top_n=config["gap"]["top_gaps_limit"],
    )


def build_project_soa_report(
    project: ProjectSnapshot,
    snapshot: PortfolioSnapshot,
    generate: bool = False,
) -> SoAReport:
    """SoA report for a project; with generate, missing controls get default entries."""
    entries: list[SoAEntry] = list(project.soa)
    controls = snapshot.all_controls()
    if generate:
        entries.extend(generate_missing(project.id, controls, entries))
    return build_soa_report(project.id, entries, controls)


def build_analytics(
    snapshot: PortfolioSnapshot,
    period: str,
    now: datetime,
    config: Optional[dict] = None,
) -> dict[str, Any]:
    """Dashboard payload: every section present, failures isolated per section."""
    now = to_naive_utc(now)
    config = config or DEFAULT_CONFIG
    events = snapshot.events
    horizon = config["analytics"]["expiration_horizon_days"]

    builders: dict[str, Callable[[], Any]] = {
        "trends": lambda: build_trend_rows(
            events.risks, events.nonconformities, events.actions, events.incidents, period, now
        ),
        "project_comparison": lambda: compare_projects(snapshot.projects),
        "maturity_heatmap": lambda: build_heatmap(heatmap_controls(snapshot.projects)),
        "certification_readiness": lambda: [score_project(p, now) for p in snapshot.projects],
        "expirations": lambda: build_expirations(snapshot.deadlines, now, horizon),
    }
    return {name: run_section(builders[name]) for name in SECTIONS}
