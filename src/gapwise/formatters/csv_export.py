"""CSV export for report rows (spreadsheet-friendly: BOM, ';' separator)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel

from ..models.gap import GapReport

BOM = "\ufeff"
DEFAULT_SEPARATOR = ";"


@dataclass
class CsvColumn:
    key: str
    label: str
    formatter: Optional[Callable[[Any, dict], str]] = None


def _escape(value: str, separator: str) -> str:
    if '"' in value or separator in value or "\n" in value or "\r" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def _as_dict(row: Any) -> dict:
    if isinstance(row, BaseModel):
        return row.model_dump(mode="json")
    return dict(row)


def to_csv(
    rows: Iterable[Any],
    columns: list[CsvColumn],
    separator: str = DEFAULT_SEPARATOR,
    bom: bool = True,
) -> str:
    """Render rows (dicts or models) as CSV text."""
    lines = [separator.join(_escape(c.label, separator) for c in columns)]
    for row in rows:
        data = _as_dict(row)
        cells = []
        for col in columns:
            value = data.get(col.key)
            text = col.formatter(value, data) if col.formatter else ("" if value is None else str(value))
            cells.append(_escape(text, separator))
        lines.append(separator.join(cells))
    return (BOM if bom else "") + "\n".join(lines)


def export_csv(
    rows: Iterable[Any],
    columns: list[CsvColumn],
    output_path: Path,
    separator: str = DEFAULT_SEPARATOR,
    bom: bool = True,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_csv(rows, columns, separator, bom), encoding="utf-8")
    return output_path


def _yes_no(value: Any, _row: dict) -> str:
    return "Yes" if value else "No"


TREND_COLUMNS = [
    CsvColumn("month", "Month"),
    CsvColumn("risks", "Risks"),
    CsvColumn("ncs", "Nonconformities"),
    CsvColumn("actions", "Actions"),
    CsvColumn("incidents", "Incidents"),
]

HEATMAP_COLUMNS = [
    CsvColumn("domain", "Domain"),
    CsvColumn("project_name", "Project"),
    CsvColumn("avg_maturity", "Average maturity"),
]

READINESS_COLUMNS = [
    CsvColumn("project_name", "Project"),
    CsvColumn("requirement_compliance", "Requirement compliance %"),
    CsvColumn("control_compliance", "Control compliance %"),
    CsvColumn("open_ncs", "Open NCs"),
    CsvColumn("pending_actions", "Pending actions"),
    CsvColumn("overdue_items", "Overdue actions"),
    CsvColumn("readiness_score", "Readiness score"),
    CsvColumn("readiness_band", "Band"),
]

SOA_COLUMNS = [
    CsvColumn("code", "Control"),
    CsvColumn("title", "Title"),
    CsvColumn("domain", "Domain"),
    CsvColumn("applicable", "Applicable", _yes_no),
    CsvColumn("implementation_status", "Implementation"),
    CsvColumn("justification", "Justification"),
]

GAP_COLUMNS = [
    CsvColumn("code", "Code"),
    CsvColumn("title", "Title"),
    CsvColumn("kind", "Type"),
    CsvColumn("domain", "Domain"),
    CsvColumn("maturity", "Maturity"),
    CsvColumn("gap", "Gap"),
    CsvColumn("severity", "Severity"),
]


def gap_rows(report: GapReport) -> list[dict]:
    """Flatten a gap report into one row per item, standard by standard."""
    rows: list[dict] = []
    for standard in report.by_standard:
        for domain in standard.by_domain:
            for gap_item in domain.items:
                item = gap_item.item
                rows.append({
                    "code": item.code,
                    "title": item.title,
                    "kind": item.kind,
                    "domain": domain.domain,
                    "maturity": item.maturity,
                    "gap": gap_item.gap,
                    "severity": gap_item.severity.value,
                })
    return rows
