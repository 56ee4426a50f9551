# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Vitest diagnostic source reporting failed assertions."""

from __future__ import annotations

import json
from collections.abc import Sequence
from subprocess import CompletedProcess
from typing import Final

from ..config import CollectionConfig
from ..core.errors import DiagnosticError
from ..core.models import Diagnostic, DiagnosticSource, create_diagnostic
from ..core.sanitize import Sanitizer
from ..core.serialization import JsonValue, coerce_optional_int, coerce_optional_str
from ..core.severity import Severity
from .base import CommandSource

TEST_FAILURE_CODE: Final[str] = "test-failure"
_FAILED_STATUS: Final[str] = "failed"


def _sequence(value: JsonValue) -> Sequence[JsonValue]:
    if isinstance(value, list):
        return value
    return ()


def parse_vitest(payload: JsonValue, *, sanitizer: Sanitizer | None = None) -> list[Diagnostic]:
    """Convert a ``vitest run --reporter=json`` payload into diagnostics.

    Only failed assertions are reported; the first failure message becomes
    the diagnostic message and the rest are kept as ``detail``.

    Args:
        payload: Decoded JSON report.
        sanitizer: Optional sanitizer applied to messages and details.

    Returns:
        list[Diagnostic]: Error diagnostics with code ``test-failure``.
    """

    if not isinstance(payload, dict):
        return []
    results: list[Diagnostic] = []
    for suite in _sequence(payload.get("testResults")):
        if not isinstance(suite, dict):
            continue
        file_path = coerce_optional_str(suite.get("name"))
        if not file_path:
            continue
        for assertion in _sequence(suite.get("assertionResults")):
            if not isinstance(assertion, dict) or assertion.get("status") != _FAILED_STATUS:
                continue
            location = assertion.get("location")
            line = column = None
            if isinstance(location, dict):
                line = coerce_optional_int(location.get("line"))
                column = coerce_optional_int(location.get("column"))
            title = coerce_optional_str(assertion.get("fullName")) or coerce_optional_str(assertion.get("title")) or ""
            failures = [str(message) for message in _sequence(assertion.get("failureMessages"))]
            if sanitizer is not None:
                title = sanitizer.sanitize(title)
                failures = [sanitizer.sanitize(message) for message in failures]
            headline = failures[0].splitlines()[0] if failures and failures[0] else "Test failed"
            results.append(
                create_diagnostic(
                    DiagnosticSource.VITEST,
                    file_path,
                    max(line or 1, 1),
                    max(column or 1, 1),
                    Severity.ERROR,
                    TEST_FAILURE_CODE,
                    f"{title}: {headline}" if title else headline,
                    detail="\n\n".join(failures) or None,
                ),
            )
    return results


class VitestSource(CommandSource):
    """Collect failing tests by running ``vitest run --reporter=json``."""

    source = DiagnosticSource.VITEST
    default_command = ("vitest",)

    def build_args(self, config: CollectionConfig) -> list[str]:
        args = ["run", "--reporter=json"]
        if config.config_path is not None:
            args.extend(["--config", str(config.config_path)])
        return args

    def parse(self, completed: CompletedProcess[str], config: CollectionConfig) -> list[Diagnostic]:
        stdout = (completed.stdout or "").strip()
        if not stdout:
            raise DiagnosticError("Vitest produced no JSON report", source=self.name)
        # Vitest may print banner lines before the JSON document.
        start = stdout.find("{")
        try:
            payload = json.loads(stdout[start:] if start >= 0 else stdout)
        except json.JSONDecodeError as exc:
            raise DiagnosticError(
                "Vitest produced output that is not valid JSON",
                source=self.name,
                cause=exc,
            ) from exc
        return parse_vitest(payload, sanitizer=config.sanitizer())


__all__ = ["TEST_FAILURE_CODE", "VitestSource", "parse_vitest"]
