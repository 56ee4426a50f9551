# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for diagnostic collection."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .core.errors import ConfigurationError, ValidationError
from .core.sanitize import Sanitizer

DEFAULT_PATTERNS: Final[tuple[str, ...]] = ("src/**/*.ts", "src/**/*.tsx")
DEFAULT_CONCURRENCY: Final[int] = 4
DEFAULT_TIMEOUT_MS: Final[int] = 30_000
DEFAULT_OUTPUT_DIR: Final[str] = ".lintharvest"

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintharvest"
ENV_OUTPUT_DIR: Final[str] = "LINTHARVEST_OUTPUT_DIR"
ENV_TIMEOUT: Final[str] = "LINTHARVEST_TIMEOUT"
ENV_SANITIZE: Final[str] = "LINTHARVEST_SANITIZE"
ENV_SANITIZE_PATHS: Final[str] = "LINTHARVEST_SANITIZE_PATHS"
ENV_SANITIZE_MESSAGES: Final[str] = "LINTHARVEST_SANITIZE_MESSAGES"
_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})

_SOURCE_FLAGS: Final[tuple[str, ...]] = ("eslint", "typescript", "vitest")


class ReadErrorPolicy(str, Enum):
    """Behaviour applied when a reported file cannot be read during enrichment."""

    SKIP = "skip"
    FAIL = "fail"


class CollectionConfig(BaseModel):
    """Immutable input describing a single collection run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    patterns: tuple[str, ...] = Field(default=DEFAULT_PATTERNS, min_length=1)
    root_path: Path = Field(default_factory=Path.cwd)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, gt=0)
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0)
    ignore_patterns: tuple[str, ...] = ()
    eslint: bool = True
    typescript: bool = True
    vitest: bool = True
    config_path: Path | None = None
    sanitize: bool = True
    sanitize_paths: bool = True
    sanitize_messages: bool = True

    @field_validator("patterns")
    @classmethod
    def _reject_blank_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not pattern.strip() for pattern in value):
            raise ValueError("patterns must not contain blank entries")
        return value

    def enabled_flags(self) -> dict[str, bool]:
        """Return the enable flag of every known diagnostic source.

        Returns:
            dict[str, bool]: Mapping of source keyword to its enable flag.
        """

        return {name: bool(getattr(self, name)) for name in _SOURCE_FLAGS}

    def sanitizer(self) -> Sanitizer | None:
        """Return the sanitizer applied to diagnostic text, or ``None`` when disabled."""

        if not self.sanitize or not (self.sanitize_paths or self.sanitize_messages):
            return None
        return Sanitizer.for_project(self.root_path, messages=self.sanitize_messages, paths=self.sanitize_paths)


def _issues_from(exc: PydanticValidationError) -> list[dict[str, object]]:
    return [
        {"loc": tuple(str(part) for part in error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]


def build_collection_config(**values: Any) -> CollectionConfig:
    """Validate ``values`` and return a :class:`CollectionConfig`.

    Args:
        **values: Field values accepted by :class:`CollectionConfig`.

    Returns:
        CollectionConfig: Validated, immutable configuration.

    Raises:
        ValidationError: If any field fails validation.
    """

    try:
        return CollectionConfig.model_validate(values)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid collection configuration",
            issues=_issues_from(exc),
            cause=exc,
        ) from exc


class ReporterSettings(BaseModel):
    """Project-level settings controlling report output and tool invocation."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root_path: Path = Field(default_factory=Path.cwd)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    read_error_policy: ReadErrorPolicy = ReadErrorPolicy.SKIP
    patterns: tuple[str, ...] = Field(default=DEFAULT_PATTERNS, min_length=1)
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, gt=0)
    tool_commands: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    sanitize: bool = True
    sanitize_paths: bool = True
    sanitize_messages: bool = True

    @property
    def resolved_output_dir(self) -> Path:
        """Return ``output_dir`` anchored at ``root_path`` when relative."""

        if self.output_dir.is_absolute():
            return self.output_dir
        return self.root_path / self.output_dir

    def command_for(self, source: str, default: tuple[str, ...]) -> tuple[str, ...]:
        """Return the executable prefix configured for ``source``.

        Args:
            source: Source name such as ``"eslint"``.
            default: Prefix used when no override is configured.

        Returns:
            tuple[str, ...]: Command prefix used to launch the tool.
        """

        override = self.tool_commands.get(source)
        return tuple(override) if override else default


def _read_pyproject_section(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(
            f"Unable to read configuration from {path}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(
            f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table",
            context={"path": str(path)},
        )
    return {key.replace("-", "_"): value for key, value in section.items()}


def _apply_env_overrides(payload: MutableMapping[str, Any], env: Mapping[str, str]) -> None:
    if output_dir := env.get(ENV_OUTPUT_DIR):
        payload["output_dir"] = output_dir
    if (timeout := env.get(ENV_TIMEOUT)) is not None and timeout.strip():
        try:
            payload["timeout"] = int(timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"{ENV_TIMEOUT} must be an integer number of milliseconds",
                context={"value": timeout},
                cause=exc,
            ) from exc
    for name, key in (
        (ENV_SANITIZE, "sanitize"),
        (ENV_SANITIZE_PATHS, "sanitize_paths"),
        (ENV_SANITIZE_MESSAGES, "sanitize_messages"),
    ):
        if (flag := env.get(name)) is not None and flag.strip():
            payload[key] = flag.strip().lower() in _TRUE_VALUES


def load_settings(root: Path | None = None, *, env: Mapping[str, str] | None = None) -> ReporterSettings:
    """Load :class:`ReporterSettings` for the project rooted at ``root``.

    ``[tool.lintharvest]`` from ``pyproject.toml`` is applied over the
    defaults, then ``LINTHARVEST_OUTPUT_DIR``, ``LINTHARVEST_TIMEOUT`` and the
    ``LINTHARVEST_SANITIZE*`` switches from the environment take precedence.

    Args:
        root: Project root; defaults to the current working directory.
        env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        ReporterSettings: Validated settings.

    Raises:
        ConfigurationError: If the configuration file cannot be parsed.
        ValidationError: If the merged payload fails validation.
    """

    project_root = (root or Path.cwd()).resolve()
    payload = _read_pyproject_section(project_root / PYPROJECT_FILENAME)
    _apply_env_overrides(payload, os.environ if env is None else env)
    payload.setdefault("root_path", project_root)
    try:
        return ReporterSettings.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid lintharvest settings",
            issues=_issues_from(exc),
            context={"root": str(project_root)},
            cause=exc,
        ) from exc


__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PATTERNS",
    "DEFAULT_TIMEOUT_MS",
    "CollectionConfig",
    "ReadErrorPolicy",
    "ReporterSettings",
    "build_collection_config",
    "load_settings",
]
