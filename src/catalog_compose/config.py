# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and TOML loading for catalog composition."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .labels import ContainerTool
from .merge import DedupPolicyName
from .types import DEFAULT_INDEX_IMAGE

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "catalog-compose"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class ComposeConfig(BaseModel):
    """Settings shared by the composition pipeline and its collaborators."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index_image: str = DEFAULT_INDEX_IMAGE
    default_index_image: str = DEFAULT_INDEX_IMAGE
    container_tool: ContainerTool = "docker"
    opm_binary: str = "opm"
    skip_tls_verify: bool = False
    use_http: bool = False
    dedup_policy: DedupPolicyName = "exact"
    parallel_render: bool = False
    render_timeout: float | None = Field(default=None, gt=0)
    use_emoji: bool = True
    use_color: bool | None = None

    @field_validator("index_image", "default_index_image", "opm_binary")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped


def _read_table(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read configuration at {path}: {exc}") from exc
    if path.name == "pyproject.toml":
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
        data = dict(section)
    return {key.replace("-", "_"): value for key, value in data.items()}


def load_config(
    path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ComposeConfig:
    """Return configuration built from defaults, an optional TOML file, and overrides.

    ``pyproject.toml`` files contribute their ``[tool.catalog-compose]`` table;
    other TOML files are read whole. Keys may use dashes or underscores.
    Overrides whose value is ``None`` are ignored.

    Args:
        path: Optional TOML document.
        overrides: Values taking precedence over the file, typically CLI flags.

    Returns:
        ComposeConfig: Validated configuration.

    Raises:
        ConfigError: When the file cannot be read or a value is invalid.
    """

    payload: dict[str, Any] = {}
    if path is not None:
        payload.update(_read_table(path))
    for key, value in (overrides or {}).items():
        if value is not None:
            payload[key] = value
    try:
        return ComposeConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = ["ComposeConfig", "ConfigError", "load_config"]
