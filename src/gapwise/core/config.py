"""3-layer configuration system for gapwise.

Loads and merges configuration from:
1. Default settings (built-in)
2. Workspace config (.gapwise/config.yaml)
3. CLI parameters (override)

Scoring weights and penalty steps are policy constants in core/readiness.py
and are not configurable here.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

CONFIG_DIR = ".gapwise"
CONFIG_FILE = "config.yaml"

DEFAULT_CONFIG: dict = {
    "gap": {
        "default_target_maturity": 3,
        "top_gaps_limit": 10,
    },
    "analytics": {
        "period": "6m",
        "expiration_horizon_days": 30,
    },
    "output": {
        "format": "json",
        "csv_separator": ";",
        "csv_bom": True,
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def config_path(workspace: Path) -> Path:
    return workspace / CONFIG_DIR / CONFIG_FILE


def load_workspace_config(workspace: Path) -> dict:
    """Load workspace configuration from .gapwise/config.yaml."""
    path = config_path(workspace)
    if not path.exists():
        return {}
    try:
        content = path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_effective_config(
    workspace: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for a report run."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    if workspace is not None:
        workspace_config = load_workspace_config(workspace)
        if workspace_config:
            config = deep_merge(config, workspace_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config


def initialize_workspace(workspace: Path) -> Path:
    """Write a starter .gapwise/config.yaml unless one already exists."""
    path = config_path(workspace)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        content = yaml.dump(
            DEFAULT_CONFIG,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        path.write_text("# gapwise workspace configuration\n\n" + content, encoding="utf-8")
    return path
