# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from lintharvest.config import CollectionConfig, build_collection_config
from lintharvest.core.models import Diagnostic, DiagnosticSource, create_diagnostic
from lintharvest.core.severity import Severity


class FakeSource:
    """In-memory source adapter returning canned diagnostics or raising."""

    def __init__(
        self,
        name: str,
        diagnostics: Sequence[Diagnostic] = (),
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._diagnostics = list(diagnostics)
        self._error = error
        self._delay = delay
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def collect(self, config: CollectionConfig) -> list[Diagnostic]:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._diagnostics)


type DiagnosticFactory = Callable[..., Diagnostic]


@pytest.fixture
def make_diagnostic() -> DiagnosticFactory:
    def _factory(
        source: DiagnosticSource = DiagnosticSource.ESLINT,
        file_path: str = "src/app.ts",
        line: int = 1,
        column: int = 1,
        severity: Severity = Severity.ERROR,
        code: str | None = "no-unused-vars",
        message: str = "problem",
    ) -> Diagnostic:
        return create_diagnostic(source, file_path, line, column, severity, code, message)

    return _factory


@pytest.fixture
def fake_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture
def collection_config(tmp_path: Path) -> CollectionConfig:
    return build_collection_config(patterns=("src/**/*.ts",), root_path=tmp_path, timeout=1000)
