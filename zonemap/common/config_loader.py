"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from zonemap.common.constants import (
    DEFAULT_CODEPOINT_PATH,
    DEFAULT_OUT_PATH,
    DEFAULT_PREFIX,
    DEFAULT_ZONES_PATH,
)
from zonemap.common.errors import ConfigurationError
from zonemap.common.fs import read_yaml
from zonemap.common.schema import validate_run_config


@dataclass(frozen=True)
class RunSettings:
    zones_path: Path
    codepoint_path: Path
    prefix: str
    out_path: Path
    report_path: Path | None = None
    workers: int = 1


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_file(path: Path) -> dict:
    try:
        payload = read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Unreadable config file {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return payload


def load_run_config(config_path: Path | None, overlay_path: Path | None = None) -> dict:
    """Load the base config and deep-merge an optional overlay on top.

    A missing base file yields an empty config so the built-in defaults apply.
    """
    base: dict = {}
    if config_path is not None and config_path.exists():
        base = _read_config_file(config_path)
    if overlay_path is not None and overlay_path.exists():
        base = _deep_merge(base, _read_config_file(overlay_path))
    return validate_run_config(base)


def resolve_settings(cfg: dict, overrides: dict[str, Any]) -> RunSettings:
    merged = dict(cfg)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    validate_run_config(merged)

    report_path = merged.get("report_path")
    return RunSettings(
        zones_path=Path(merged.get("zones_path") or DEFAULT_ZONES_PATH),
        codepoint_path=Path(merged.get("codepoint_path") or DEFAULT_CODEPOINT_PATH),
        prefix=merged.get("prefix") or DEFAULT_PREFIX,
        out_path=Path(merged.get("out_path") or DEFAULT_OUT_PATH),
        report_path=Path(report_path) if report_path else None,
        workers=int(merged.get("workers") or 1),
    )
