"""gapwise - compliance maturity and gap analysis reports.

Every command reads a portfolio snapshot exported by the persistence layer
and prints (or writes) one report. The clock is pinned by --now, then by the
snapshot's own `now`, then by the wall clock.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..compliance.loader import SnapshotError, get_available_snapshots, load_snapshot
from ..core.analytics import (
    build_analytics,
    build_project_gap_report,
    build_project_soa_report,
)
from ..core.config import get_effective_config, initialize_workspace
from ..core.errors import EngineInputError
from ..core.heatmap import build_heatmap, heatmap_controls
from ..core.readiness import score_project
from ..core.trends import PERIOD_MONTHS, build_trend_rows
from ..formatters.csv_export import (
    GAP_COLUMNS,
    HEATMAP_COLUMNS,
    READINESS_COLUMNS,
    SOA_COLUMNS,
    TREND_COLUMNS,
    export_csv,
    gap_rows,
    to_csv,
)
from ..formatters.markdown import render_gap_report, render_readiness, render_soa
from ..models.snapshot import PortfolioSnapshot
from ..models.timestamps import to_naive_utc, utc_now

console = Console()

EXIT_INPUT_ERROR = 1

FORMATS = ["json", "markdown", "csv"]


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"not an ISO date/time: {value}", param_hint="--now") from None


def _resolve_snapshot_path(path: Path) -> Path:
    if path.is_dir():
        available = get_available_snapshots(path)
        if not available:
            raise SnapshotError(f"No snapshot files in {path}")
        return available[-1]
    return path


class RunContext:
    """Loaded snapshot, pinned clock and effective config for one command."""

    def __init__(self, snapshot: PortfolioSnapshot, now: datetime, config: dict) -> None:
        self.snapshot = snapshot
        self.now = now
        self.config = config

    @property
    def output_format(self) -> str:
        return self.config["output"]["format"]

    def csv(self, rows: Any, columns: list) -> str:
        return to_csv(
            rows,
            columns,
            separator=self.config["output"]["csv_separator"],
            bom=self.config["output"]["csv_bom"],
        )

    def emit_csv(self, rows: Any, columns: list, output: Optional[Path]) -> None:
        if output is None:
            click.echo(self.csv(rows, columns))
            return
        export_csv(
            rows,
            columns,
            output,
            separator=self.config["output"]["csv_separator"],
            bom=self.config["output"]["csv_bom"],
        )
        console.print(f"  [green]OK[/green] Wrote {output}")


def _prepare(
    ctx: click.Context,
    snapshot_path: Path,
    now: Optional[str],
    output_format: Optional[str],
    extra_overrides: Optional[dict] = None,
) -> RunContext:
    try:
        path = _resolve_snapshot_path(snapshot_path)
        snapshot = load_snapshot(path)
    except (SnapshotError, ValidationError) as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        ctx.exit(EXIT_INPUT_ERROR)

    overrides: dict = dict(extra_overrides or {})
    if output_format:
        overrides["output"] = {"format": output_format}

    config = get_effective_config(path.parent, cli_overrides=overrides)
    if config["output"]["format"] not in FORMATS:
        _fail(
            ctx,
            f"invalid output.format: {config['output']['format']!r} "
            f"(expected one of {', '.join(FORMATS)})",
        )
    clock = to_naive_utc(_parse_now(now) or snapshot.now) or utc_now()
    return RunContext(snapshot, clock, config)


def _emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"  [green]OK[/green] Wrote {output}")


def _dump_json(payload: Any) -> str:
    if isinstance(payload, list):
        payload = [p.model_dump(mode="json") for p in payload]
    elif hasattr(payload, "model_dump"):
        payload = payload.model_dump(mode="json")
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _fail(ctx: click.Context, message: str) -> None:
    console.print(f"  [red]ERROR[/red] {escape(message)}")
    ctx.exit(EXIT_INPUT_ERROR)


def snapshot_options(func):
    """Options shared by every report command."""
    func = click.option("--output", "-o", type=click.Path(path_type=Path), help="Write to file")(func)
    func = click.option("--now", type=str, help="Pin the clock (ISO date/time)")(func)
    func = click.option("--output-format", "-f", type=click.Choice(FORMATS), help="Output format")(func)
    func = click.option(
        "--snapshot", "-s", "snapshot_path",
        type=click.Path(exists=True, path_type=Path),
        required=True,
        help="Snapshot file, or a directory of snapshots (latest is used)",
    )(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="gapwise")
def gapwise_cli() -> None:
    """gapwise - compliance maturity, gap and readiness reports."""


@gapwise_cli.command()
@click.option("--workspace", "-w", type=click.Path(file_okay=False, path_type=Path), default=".")
def init(workspace: Path) -> None:
    """Create .gapwise/config.yaml in a workspace."""
    path = initialize_workspace(workspace)
    console.print(f"  [green]Initialized[/green] {path}")


@gapwise_cli.command()
@snapshot_options
@click.option("--project", "-p", "project_id", required=True, help="Project ID")
@click.option("--top", type=int, help="Number of top gaps to list")
@click.pass_context
def gap(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
    project_id: str,
    top: Optional[int],
) -> None:
    """Gap analysis report for one project."""
    overrides = {"gap": {"top_gaps_limit": top}} if top is not None else None
    run = _prepare(ctx, snapshot_path, now, output_format, overrides)
    project = run.snapshot.get_project(project_id)
    if project is None:
        _fail(ctx, f"Project not found: {project_id}")

    try:
        report = build_project_gap_report(project, run.config)
    except EngineInputError as e:
        _fail(ctx, str(e))

    if run.output_format == "csv":
        run.emit_csv(gap_rows(report), GAP_COLUMNS, output)
    elif run.output_format == "markdown":
        _emit(render_gap_report(report, run.now, project.name), output)
    else:
        _emit(_dump_json(report), output)


@gapwise_cli.command()
@snapshot_options
@click.option("--project", "-p", "project_id", required=True, help="Project ID")
@click.option("--generate", is_flag=True, help="Add default entries for controls without one")
@click.pass_context
def soa(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
    project_id: str,
    generate: bool,
) -> None:
    """Statement of Applicability for one project."""
    run = _prepare(ctx, snapshot_path, now, output_format)
    project = run.snapshot.get_project(project_id)
    if project is None:
        _fail(ctx, f"Project not found: {project_id}")

    report = build_project_soa_report(project, run.snapshot, generate=generate)

    if run.output_format == "csv":
        run.emit_csv(report.entries, SOA_COLUMNS, output)
    elif run.output_format == "markdown":
        _emit(render_soa(report, run.now, project.name), output)
    else:
        _emit(_dump_json(report), output)


@gapwise_cli.command()
@snapshot_options
@click.option("--project", "-p", "project_id", help="Limit to one project")
@click.pass_context
def readiness(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
    project_id: Optional[str],
) -> None:
    """Certification-readiness score per project."""
    run = _prepare(ctx, snapshot_path, now, output_format)
    projects = run.snapshot.projects
    if project_id:
        projects = [p for p in projects if p.id == project_id]
        if not projects:
            _fail(ctx, f"Project not found: {project_id}")

    reports = [score_project(p, run.now) for p in projects]

    if run.output_format == "csv":
        run.emit_csv(reports, READINESS_COLUMNS, output)
    elif run.output_format == "markdown":
        _emit(render_readiness(reports, run.now), output)
    else:
        _emit(_dump_json(reports), output)


@gapwise_cli.command()
@snapshot_options
@click.option("--period", type=click.Choice(list(PERIOD_MONTHS)), help="Lookback window")
@click.pass_context
def trends(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
    period: Optional[str],
) -> None:
    """Monthly risk / NC / action / incident counts."""
    overrides = {"analytics": {"period": period}} if period else None
    run = _prepare(ctx, snapshot_path, now, output_format, overrides)
    events = run.snapshot.events

    try:
        rows = build_trend_rows(
            events.risks,
            events.nonconformities,
            events.actions,
            events.incidents,
            run.config["analytics"]["period"],
            run.now,
        )
    except EngineInputError as e:
        _fail(ctx, str(e))

    if run.output_format == "csv":
        run.emit_csv(rows, TREND_COLUMNS, output)
    else:
        _emit(_dump_json(rows), output)


@gapwise_cli.command()
@snapshot_options
@click.pass_context
def heatmap(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
) -> None:
    """Average control maturity by domain and project."""
    run = _prepare(ctx, snapshot_path, now, output_format)
    cells = build_heatmap(heatmap_controls(run.snapshot.projects))

    if run.output_format == "csv":
        run.emit_csv(cells, HEATMAP_COLUMNS, output)
    else:
        _emit(_dump_json(cells), output)


@gapwise_cli.command()
@snapshot_options
@click.option("--period", type=str, help="Lookback window (3m, 6m, 12m)")
@click.pass_context
def analytics(
    ctx: click.Context,
    snapshot_path: Path,
    output_format: Optional[str],
    now: Optional[str],
    output: Optional[Path],
    period: Optional[str],
) -> None:
    """Full dashboard payload (JSON). Sections fail independently."""
    overrides = {"analytics": {"period": period}} if period else None
    run = _prepare(ctx, snapshot_path, now, output_format, overrides)
    payload = build_analytics(run.snapshot, run.config["analytics"]["period"], run.now, run.config)

    for name, section in payload.items():
        if isinstance(section, dict) and "error" in section:
            console.print(f"  [yellow]WARN[/yellow] {name}: {escape(section['error'])}")
    _emit(_dump_json(payload), output)


def main() -> None:
    gapwise_cli()


if __name__ == "__main__":
    main()
