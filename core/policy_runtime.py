"""Configuration loading for a release run."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

PROJECT_CONFIG_NAME = "releasekit.yaml"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "config"


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Resolve runtime output paths and create their parent directories.

    Build directories (dist, tmp) are left to the tasks that own them.
    """
    paths_cfg = config.get("paths", {})
    resolved: dict[str, Path] = {}
    audit_path = paths_cfg.get("audit_log_path")
    if audit_path:
        resolved["audit_log_path"] = (root / audit_path).resolve()
        resolved["audit_log_path"].parent.mkdir(parents=True, exist_ok=True)
    return resolved


def load_effective_config(
    root: Path,
    config_dir: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge bundled defaults, the project's releasekit.yaml and CLI overrides."""
    defaults = load_yaml((config_dir or default_config_dir()) / "default.yaml")
    project_cfg = load_yaml(root / PROJECT_CONFIG_NAME)
    merged = merge_dicts(defaults, project_cfg)
    if overrides:
        merged = merge_dicts(merged, overrides)
    return merged
