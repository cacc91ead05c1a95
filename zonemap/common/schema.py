"""Minimal strict schema for the run configuration file."""

from __future__ import annotations

from zonemap.common.errors import ConfigurationError

RUN_CONFIG_KEYS = {
    "zones_path",
    "codepoint_path",
    "prefix",
    "out_path",
    "report_path",
    "workers",
}
_STRING_KEYS = RUN_CONFIG_KEYS - {"workers"}


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigurationError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_run_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigurationError("run config must be a mapping")
    _assert_no_unknown_keys(cfg, RUN_CONFIG_KEYS, "run config", allow_unknown)

    for key in sorted(_STRING_KEYS & set(cfg)):
        value = cfg[key]
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"run config {key} must be a string")

    if "prefix" in cfg and cfg["prefix"] is not None and not cfg["prefix"].strip():
        raise ConfigurationError("run config prefix must not be blank")

    workers = cfg.get("workers")
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        raise ConfigurationError("run config workers must be a positive integer")

    return cfg
