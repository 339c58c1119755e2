"""Portfolio snapshot loading.

Snapshots are YAML (or JSON, which YAML also reads) documents exported by the
persistence layer. Shape violations surface as pydantic ValidationErrors that
name the offending field; unreadable files raise SnapshotError.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from ..models.snapshot import PortfolioSnapshot


class SnapshotError(Exception):
    """The snapshot file could not be read or parsed."""


def load_snapshot(path: Path) -> PortfolioSnapshot:
    """Load and validate a portfolio snapshot file."""
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {path}")
    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8-sig"))
    except yaml.YAMLError as e:
        raise SnapshotError(f"Snapshot {path.name} is not valid YAML: {e}") from e

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise SnapshotError(f"Snapshot {path.name} must be a mapping at the top level")

    return PortfolioSnapshot.model_validate(content)


def get_available_snapshots(snapshots_dir: Path) -> list[Path]:
    """List snapshot files in a directory, newest name last."""
    if not snapshots_dir.exists():
        return []
    found = [
        p for p in snapshots_dir.iterdir()
        if p.is_file() and p.suffix.lower() in (".yaml", ".yml", ".json")
    ]
    return sorted(found, key=lambda p: p.name)
