"""Markdown rendering of gap, readiness and SoA reports."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .. import __version__
from ..models.gap import GapReport
from ..models.maturity import MATURITY_LABELS
from ..models.readiness import ReadinessReport
from ..models.soa import SoAReport

SEVERITY_MARK = {"ok": "OK", "warning": "WARN", "critical": "CRIT"}


def _footer(generated_at: datetime) -> list[str]:
    return ["---", f"*Generated by gapwise v{__version__} at {generated_at.strftime('%Y-%m-%d %H:%M:%S')}*"]


def render_gap_report(
    report: GapReport,
    generated_at: datetime,
    project_name: str = "",
) -> str:
    """Render the gap analysis report."""
    overall = report.overall
    target_label = MATURITY_LABELS.get(report.target_maturity, "?")

    lines: list[str] = []
    lines.append("# Gap Analysis Report")
    lines.append("")
    if project_name:
        lines.append(f"**Project:** {project_name}")
    lines.append(f"**Target maturity:** {report.target_maturity} ({target_label})")
    lines.append("")

    lines.append("## Overall")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Items | {overall.total_items} |")
    lines.append(f"| Average maturity | {overall.average_maturity} |")
    lines.append(f"| Compliant (maturity >= 3) | {overall.compliant_count} |")
    lines.append(f"| Gap | {overall.gap_percentage}% |")
    lines.append("")

    lines.append("## Maturity Distribution")
    lines.append("")
    lines.append("| Level | Label | Count |")
    lines.append("|-------|-------|-------|")
    for bucket in report.maturity_distribution:
        lines.append(f"| {bucket.level} | {bucket.label} | {bucket.count} |")
    lines.append("")

    for standard in report.by_standard:
        title = standard.standard_name or standard.standard_code or standard.standard_id
        lines.append(f"## {title} (avg {standard.avg_maturity})")
        lines.append("")
        for domain in standard.by_domain:
            lines.append(f"### {domain.domain} (avg {domain.avg_maturity})")
            lines.append("")
            lines.append("| Code | Title | Maturity | Gap |")
            lines.append("|------|-------|----------|-----|")
            for g in domain.items:
                mark = SEVERITY_MARK[g.severity.value]
                lines.append(f"| {g.item.code} | {g.item.title} | {g.item.maturity} | {g.gap} {mark} |")
            lines.append("")

    if report.top_gaps:
        lines.append("## Top Gaps")
        lines.append("")
        for i, g in enumerate(report.top_gaps, 1):
            lines.append(
                f"{i}. **{g.item.code}** {g.item.title}: maturity {g.item.maturity}, "
                f"gap {g.gap} [{g.severity.value.upper()}]"
            )
        lines.append("")

    lines.extend(_footer(generated_at))
    return "\n".join(lines)


def render_readiness(reports: list[ReadinessReport], generated_at: datetime) -> str:
    lines: list[str] = []
    lines.append("# Certification Readiness")
    lines.append("")
    lines.append("| Project | Requirements % | Controls % | Open NCs | Pending | Overdue | Score | Band |")
    lines.append("|---------|----------------|------------|----------|---------|---------|-------|------|")
    for r in sorted(reports, key=lambda r: -r.readiness_score):
        lines.append(
            f"| {r.project_name or r.project_id} | {r.requirement_compliance} | "
            f"{r.control_compliance} | {r.open_ncs} | {r.pending_actions} | "
            f"{r.overdue_items} | **{r.readiness_score}** | {r.readiness_band.value} |"
        )
    lines.append("")
    lines.extend(_footer(generated_at))
    return "\n".join(lines)


def render_soa(
    report: SoAReport,
    generated_at: datetime,
    project_name: Optional[str] = None,
) -> str:
    summary = report.summary
    lines: list[str] = []
    lines.append("# Statement of Applicability")
    lines.append("")
    lines.append(f"**Project:** {project_name or report.project_id}")
    lines.append("")
    lines.append(
        f"Total {summary.total} | Applicable {summary.applicable} | "
        f"Not applicable {summary.not_applicable} | Implemented {summary.implemented} "
        f"({summary.implementation_percentage}%)"
    )
    lines.append("")
    lines.append("| Control | Title | Applicable | Implementation | Justification |")
    lines.append("|---------|-------|------------|----------------|---------------|")
    for row in report.entries:
        status = row.implementation_status.value if row.implementation_status else "-"
        lines.append(
            f"| {row.code or row.control_id} | {row.title} | "
            f"{'Yes' if row.applicable else 'No'} | {status} | {row.justification or ''} |"
        )
    lines.append("")
    lines.extend(_footer(generated_at))
    return "\n".join(lines)
