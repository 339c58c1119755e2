"""Shared fixtures for gapwise tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
import yaml

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def sample_snapshot_data() -> dict:
    """A two-project portfolio snapshot as the persistence layer exports it."""
    return {
        "now": "2025-06-15T12:00:00",
        "standards": [
            {
                "id": "iso27001",
                "code": "ISO27001",
                "name": "ISO/IEC 27001:2022",
                "controls": [
                    {"id": "c-5.1", "code": "A.5.1", "title": "Policies", "domain": "Organizational", "standard_id": "iso27001"},
                    {"id": "c-5.2", "code": "A.5.2", "title": "Roles", "domain": "Organizational", "standard_id": "iso27001"},
                    {"id": "c-8.1", "code": "A.8.1", "title": "Endpoints", "domain": "Technological", "standard_id": "iso27001"},
                ],
            }
        ],
        "projects": [
            {
                "id": "p1",
                "name": "Alpha ISMS",
                "target_maturity": 3,
                "requirements": [
                    {"id": "r1", "code": "4.1", "title": "Context", "kind": "requirement", "domain": "4", "maturity": 3, "standard_id": "iso27001"},
                    {"id": "r2", "code": "6.1", "title": "Risk", "kind": "requirement", "domain": "6", "maturity": 1, "standard_id": "iso27001"},
                ],
                "controls": [
                    {"id": "pc1", "code": "A.5.1", "title": "Policies", "domain": "Organizational", "maturity": 4, "standard_id": "iso27001"},
                    {"id": "pc2", "code": "A.8.1", "title": "Endpoints", "domain": "Technological", "maturity": 2, "standard_id": "iso27001"},
                ],
                "soa": [
                    {"project_id": "p1", "control_id": "c-5.1", "applicable": True, "implementation_status": "fully_implemented"},
                    {"project_id": "p1", "control_id": "c-8.1", "applicable": False, "implementation_status": "fully_implemented",
                     "justification": "No endpoints in scope"},
                ],
                "open_nonconformities": 1,
                "action_plans": [
                    {"id": "a1", "title": "Patch", "status": "in_progress", "due_date": "2025-06-01T00:00:00"},
                    {"id": "a2", "title": "Train", "status": "planned", "due_date": "2025-07-01T00:00:00"},
                    {"id": "a3", "title": "Old", "status": "completed", "due_date": "2025-01-01T00:00:00"},
                ],
            },
            {
                "id": "p2",
                "name": "Beta ISMS",
                "controls": [
                    {"id": "pc3", "code": "A.5.1", "title": "Policies", "domain": "Organizational", "maturity": 1, "standard_id": "iso27001"},
                ],
            },
        ],
        "events": {
            "risks": [{"created_at": "2025-04-03T10:00:00"}, {"created_at": "2025-06-01T10:00:00"}],
            "nonconformities": [{"created_at": "2024-01-01T00:00:00"}],
            "actions": [{"created_at": "2025-05-20T08:00:00"}],
            "incidents": [],
        },
        "deadlines": [
            {"kind": "action", "id": "a2", "title": "Train", "due_date": "2025-07-01T12:00:00", "project_name": "Alpha ISMS"},
            {"kind": "audit", "id": "au1", "title": "Stage 1 audit", "due_date": "2025-09-01T00:00:00"},
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path: Path, sample_snapshot_data: dict) -> Path:
    """Write the sample snapshot to a YAML file inside a workspace."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    path = workspace / "snapshot.yaml"
    path.write_text(yaml.safe_dump(sample_snapshot_data, sort_keys=False), encoding="utf-8")
    return path
