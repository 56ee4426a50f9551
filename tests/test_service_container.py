# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the service container and default wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintharvest.application.service import DiagnosticApplicationService
from lintharvest.collection.analytics import DiagnosticAnalytics
from lintharvest.config import ReporterSettings
from lintharvest.filesystem.layout import OutputLayout
from lintharvest.runtime.container import (
    ANALYTICS,
    APPLICATION,
    OUTPUT_LAYOUT,
    SOURCES,
    ServiceContainer,
    ServiceResolutionError,
    build_services,
    default_sources,
)
from lintharvest.sources import EslintSource, TypeScriptSource, VitestSource


def test_register_and_resolve_singleton() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: object())

    assert container.resolve("value") is container.resolve("value")
    assert "value" in container
    assert "other" not in container


def test_non_singleton_builds_fresh_instances() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: object(), singleton=False)

    assert container.resolve("value") is not container.resolve("value")


def test_duplicate_registration_requires_replace() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: 1)

    with pytest.raises(ValueError):
        container.register("value", lambda _: 2)

    container.register("value", lambda _: 2, replace=True)
    assert container.resolve("value") == 2


def test_missing_service_raises() -> None:
    with pytest.raises(ServiceResolutionError):
        ServiceContainer().resolve("nope")


def test_resolve_as_checks_type() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: "text")

    with pytest.raises(TypeError):
        container.resolve_as("value", int)


def test_build_services_wires_application(tmp_path: Path) -> None:
    settings = ReporterSettings(root_path=tmp_path, output_dir=Path("out"))

    container = build_services(settings)

    service = container.resolve_as(APPLICATION, DiagnosticApplicationService)
    layout = container.resolve_as(OUTPUT_LAYOUT, OutputLayout)
    assert isinstance(service, DiagnosticApplicationService)
    assert layout.output_dir == tmp_path / "out"
    assert [source.name for source in container.resolve(SOURCES)] == ["eslint", "typescript", "vitest"]


def test_build_services_returns_independent_containers(tmp_path: Path) -> None:
    settings = ReporterSettings(root_path=tmp_path)

    first = build_services(settings).resolve(ANALYTICS)
    second = build_services(settings).resolve(ANALYTICS)

    assert isinstance(first, DiagnosticAnalytics)
    assert first is not second


def test_default_sources_apply_command_overrides(tmp_path: Path) -> None:
    settings = ReporterSettings(root_path=tmp_path, tool_commands={"eslint": ("npx", "eslint")})

    eslint, typescript, vitest = default_sources(settings)

    assert isinstance(eslint, EslintSource) and eslint.command == ("npx", "eslint")
    assert isinstance(typescript, TypeScriptSource) and typescript.command == ("tsc",)
    assert isinstance(vitest, VitestSource)
