from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from feature_kernel.config.models import RunConfig
from feature_kernel.config.validator import ConfigError


def load_yaml_config(path: Path) -> dict[str, object]:
    # Returns the raw mapping; typed validation happens in load_run_config.
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def load_run_config(path: Path | None = None) -> RunConfig:
    # No path means defaults; an empty file behaves the same.
    raw = load_yaml_config(path) if path is not None else {}
    return parse_run_config(raw)


def parse_run_config(raw: dict[str, object]) -> RunConfig:
    try:
        return RunConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    # First error with its dotted location keeps CLI messages short.
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]
