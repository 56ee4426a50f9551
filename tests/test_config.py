# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration validation and settings loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError as PydanticValidationError

from lintharvest.config import (
    DEFAULT_PATTERNS,
    ReadErrorPolicy,
    build_collection_config,
    load_settings,
)
from lintharvest.core.errors import ConfigurationError, ValidationError


def test_collection_config_defaults(tmp_path: Path) -> None:
    config = build_collection_config(root_path=tmp_path)

    assert config.patterns == DEFAULT_PATTERNS
    assert config.concurrency == 4
    assert config.timeout == 30_000
    assert config.eslint and config.typescript
    assert config.vitest
    assert config.enabled_flags() == {"eslint": True, "typescript": True, "vitest": True}


@pytest.mark.parametrize(
    ("values", "field"),
    [
        ({"patterns": ()}, "patterns"),
        ({"concurrency": 0}, "concurrency"),
        ({"timeout": -1}, "timeout"),
        ({"patterns": ("  ",)}, "patterns"),
    ],
)
def test_collection_config_rejects_invalid_values(values: dict[str, object], field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_collection_config(**values)

    assert any(issue["loc"][0] == field for issue in excinfo.value.issues)


def test_collection_config_is_immutable(tmp_path: Path) -> None:
    config = build_collection_config(root_path=tmp_path)

    with pytest.raises(PydanticValidationError):
        config.timeout = 1  # type: ignore[misc]


def test_load_settings_reads_pyproject_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        dedent(
            """
            [tool.lintharvest]
            output-dir = "build/diagnostics"
            timeout = 5000
            read-error-policy = "fail"
            patterns = ["lib/**/*.ts"]

            [tool.lintharvest.tool-commands]
            eslint = ["npx", "eslint"]
            """,
        ),
        encoding="utf-8",
    )

    settings = load_settings(tmp_path, env={})

    assert settings.resolved_output_dir == tmp_path.resolve() / "build" / "diagnostics"
    assert settings.timeout == 5000
    assert settings.read_error_policy is ReadErrorPolicy.FAIL
    assert settings.patterns == ("lib/**/*.ts",)
    assert settings.command_for("eslint", ("eslint",)) == ("npx", "eslint")
    assert settings.command_for("vitest", ("vitest",)) == ("vitest",)


def test_environment_overrides_take_precedence(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintharvest]\ntimeout = 5000\n", encoding="utf-8")

    settings = load_settings(tmp_path, env={"LINTHARVEST_TIMEOUT": "10", "LINTHARVEST_OUTPUT_DIR": "/tmp/out"})

    assert settings.timeout == 10
    assert settings.resolved_output_dir == Path("/tmp/out")


def test_load_settings_without_pyproject_uses_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path, env={})

    assert settings.root_path == tmp_path.resolve()
    assert settings.read_error_policy is ReadErrorPolicy.SKIP
    assert settings.resolved_output_dir == tmp_path.resolve() / ".lintharvest"


def test_malformed_pyproject_raises_configuration_error(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintharvest\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_settings(tmp_path, env={})


def test_invalid_env_timeout_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="LINTHARVEST_TIMEOUT"):
        load_settings(tmp_path, env={"LINTHARVEST_TIMEOUT": "soon"})


def test_unknown_setting_raises_validation_error(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintharvest]\ncolour = true\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_settings(tmp_path, env={})


def test_sanitize_switches_default_on_and_follow_environment(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintharvest]\nsanitize-paths = false\n", encoding="utf-8")

    defaults = load_settings(tmp_path, env={})
    overridden = load_settings(tmp_path, env={"LINTHARVEST_SANITIZE": "0", "LINTHARVEST_SANITIZE_PATHS": "true"})

    assert defaults.sanitize and defaults.sanitize_messages
    assert not defaults.sanitize_paths
    assert not overridden.sanitize
    assert overridden.sanitize_paths


def test_collection_config_sanitizer_follows_switches(tmp_path: Path) -> None:
    sanitizer = build_collection_config(root_path=tmp_path, sanitize_paths=False).sanitizer()

    assert sanitizer is not None
    assert sanitizer.messages and not sanitizer.paths
    assert sanitizer.root == tmp_path.resolve()
    assert build_collection_config(root_path=tmp_path, sanitize=False).sanitizer() is None
    silent = build_collection_config(root_path=tmp_path, sanitize_paths=False, sanitize_messages=False)
    assert silent.sanitizer() is None
