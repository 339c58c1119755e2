"""Tests for formatters/."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from gapwise.core.gaps import build_gap_report
from gapwise.core.readiness import score_project
from gapwise.core.soa import build_soa_report
from gapwise.formatters.csv_export import (
    BOM,
    GAP_COLUMNS,
    SOA_COLUMNS,
    TREND_COLUMNS,
    CsvColumn,
    export_csv,
    gap_rows,
    to_csv,
)
from gapwise.formatters.markdown import render_gap_report, render_readiness, render_soa
from gapwise.models.analytics import TrendRow
from gapwise.models.readiness import ProjectSnapshot
from gapwise.models.soa import SoAEntry, StandardControl

from factories import make_item

GENERATED = datetime(2025, 6, 15, 12, 0, 0)


class TestToCsv:
    def test_header_and_rows(self):
        rows = [TrendRow(month="2025-05", risks=1), TrendRow(month="2025-06", incidents=2)]
        text = to_csv(rows, TREND_COLUMNS, bom=False)
        lines = text.split("\n")
        assert lines[0] == "Month;Risks;Nonconformities;Actions;Incidents"
        assert lines[1] == "2025-05;1;0;0;0"
        assert lines[2] == "2025-06;0;0;0;2"

    def test_bom_prefix(self):
        assert to_csv([], TREND_COLUMNS).startswith(BOM)

    def test_escaping(self):
        columns = [CsvColumn("v", "Value")]
        text = to_csv([{"v": 'a;b'}, {"v": 'say "hi"'}, {"v": "x\ny"}, {"v": None}], columns, bom=False)
        assert text.split("\n")[1] == '"a;b"'
        assert '"say ""hi"""' in text
        assert '"x\ny"' in text
        assert text.endswith("\n")

    def test_carriage_return_quoted(self):
        text = to_csv([{"v": "line one\r\nline two"}], [CsvColumn("v", "Value")], bom=False)
        assert text == 'Value\n"line one\r\nline two"'

    def test_formatter(self):
        entry = {"code": "A.5.1", "applicable": False}
        text = to_csv([entry], SOA_COLUMNS, bom=False)
        assert text.split("\n")[1].startswith("A.5.1;;;No;")

    def test_custom_separator(self):
        text = to_csv([{"a": 1, "b": 2}], [CsvColumn("a", "A"), CsvColumn("b", "B")], separator=",", bom=False)
        assert text == "A,B\n1,2"

    def test_export_writes_file(self, tmp_path: Path):
        path = export_csv([TrendRow(month="2025-06")], TREND_COLUMNS, tmp_path / "out" / "trends.csv")
        assert path.read_text(encoding="utf-8").startswith(BOM + "Month")


class TestGapRows:
    def test_one_row_per_item(self):
        report = build_gap_report([make_item("A.1", 1), make_item("A.2", 4, domain=None)], 3)
        rows = gap_rows(report)
        assert len(rows) == 2
        assert {r["severity"] for r in rows} == {"critical", "ok"}
        text = to_csv(rows, GAP_COLUMNS, bom=False)
        assert text.split("\n")[0] == "Code;Title;Type;Domain;Maturity;Gap;Severity"


class TestMarkdown:
    def test_gap_report(self):
        report = build_gap_report([make_item("A.5.1", 1), make_item("A.5.2", 3)], 3)
        text = render_gap_report(report, GENERATED, "Alpha ISMS")
        assert "# Gap Analysis Report" in text
        assert "**Project:** Alpha ISMS" in text
        assert "**Target maturity:** 3 (Managed)" in text
        assert "| Gap | 50.0% |" in text
        assert "## Top Gaps" in text
        assert "[CRITICAL]" in text
        assert "2025-06-15 12:00:00" in text

    def test_gap_report_empty(self):
        text = render_gap_report(build_gap_report([], 3), GENERATED)
        assert "| Items | 0 |" in text
        assert "## Top Gaps" not in text

    def test_readiness_sorted_by_score(self):
        strong = ProjectSnapshot(id="a", name="Strong", controls=[make_item("C.1", 4)])
        weak = ProjectSnapshot(id="b", name="Weak", open_nonconformities=9)
        reports = [score_project(weak, GENERATED), score_project(strong, GENERATED)]
        text = render_readiness(reports, GENERATED)
        assert text.index("Strong") < text.index("Weak")
        assert "| **60** | near |" in text
        assert "| **15** | not_ready |" in text

    def test_soa(self):
        controls = [StandardControl(id="c1", code="A.5.1", title="Policies")]
        entries = [SoAEntry(project_id="p1", control_id="c1", applicable=False, justification="Out of scope")]
        text = render_soa(build_soa_report("p1", entries, controls), GENERATED, "Alpha")
        assert "| A.5.1 | Policies | No | - | Out of scope |" in text
        assert "Not applicable 1" in text

    def test_soa_keeps_status_of_excluded_control(self):
        controls = [StandardControl(id="c1", code="A.8.1", title="Endpoints")]
        entries = [SoAEntry(project_id="p1", control_id="c1", applicable=False, implementation_status="fully_implemented")]
        text = render_soa(build_soa_report("p1", entries, controls), GENERATED)
        assert "| A.8.1 | Endpoints | No | fully_implemented |" in text
        assert "Implemented 0" in text
        assert "Not applicable 1" in text
