"""Typed configuration schema and loader for the docgrep package."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, conint, field_validator

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class SearchSettings(BaseModel):
    """Options for the match scanner."""

    context: conint(ge=0)
    ignore_case: bool
    max_matches: conint(ge=1) | None = None

    model_config = ConfigDict(extra="forbid")


class ArchiveSettings(BaseModel):
    """Archive traversal limits."""

    max_depth: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class DiscoverySettings(BaseModel):
    """Which files are picked up when walking a directory."""

    extensions: list[str]
    skip_dirs: list[str]

    model_config = ConfigDict(extra="forbid")

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("extensions must not be empty strings")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized


class ReportSettings(BaseModel):
    """Terminal report options."""

    quiet: bool
    color: bool

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    search: SearchSettings
    archive: ArchiveSettings
    discovery: DiscoverySettings
    report: ReportSettings
    workers: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------

#: Environment variables mapped onto configuration keys.
ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "DOCGREP_CONTEXT": ("search", "context"),
    "DOCGREP_WORKERS": ("workers",),
}


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def _apply_env(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    for var, keys in ENV_OVERRIDES.items():
        if var not in environ:
            continue
        override: dict[str, Any] = {keys[-1]: environ[var]}
        for key in reversed(keys[:-1]):
            override = {key: override}
        data = deep_merge_dicts(data, override)
    return data


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    environment variables listed in :data:`ENV_OVERRIDES`.  Values from the
    environment are validated (and coerced) by the pydantic models.
    """

    with (
        importlib_resources.files("docgrep.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    environ = env if env is not None else os.environ
    merged = _apply_env(merged, environ)

    return ConfigModel.model_validate(merged)


__all__ = [
    "ConfigModel",
    "SearchSettings",
    "ArchiveSettings",
    "DiscoverySettings",
    "ReportSettings",
    "ENV_OVERRIDES",
    "deep_merge_dicts",
    "load_config",
]
