"""Configuration models and loading for filterhooks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

PROJECT_CONFIG_NAME = ".filterhooks.yaml"


class BindingConfig(BaseModel):
    """A callback registration declared in configuration."""

    model_config = ConfigDict(extra="forbid")

    tag: str = Field(min_length=1)
    target: str = Field(min_length=1)
    priority: int | None = None
    accepted_args: int | None = Field(default=None, ge=0)


class HooksConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_priority: int = 10
    default_accepted_args: int = Field(default=1, ge=0)
    all_tag: str = Field(default="all", min_length=1)
    bindings: list[BindingConfig] = Field(default_factory=list)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_effective_config(
    project_path: str | Path = ".",
    system_defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> HooksConfig:
    """Load config with precedence runtime > project .filterhooks.yaml > system."""
    project_config = _load_yaml(Path(project_path) / PROJECT_CONFIG_NAME)

    merged: dict[str, Any] = {}
    if system_defaults:
        merged = _deep_merge(merged, system_defaults)
    if project_config:
        merged = _deep_merge(merged, project_config)
    if runtime_override:
        merged = _deep_merge(merged, runtime_override)

    return HooksConfig.model_validate(merged)
