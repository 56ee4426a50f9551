# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ESLint diagnostic source."""

from __future__ import annotations

import json
from collections.abc import Sequence
from subprocess import CompletedProcess
from typing import Final

from ..config import CollectionConfig
from ..core.errors import DiagnosticError
from ..core.models import Diagnostic, DiagnosticFix, DiagnosticSource, create_diagnostic
from ..core.sanitize import Sanitizer
from ..core.serialization import JsonValue, coerce_optional_int, coerce_optional_str
from ..core.severity import Severity
from .base import CommandSource

_ESLINT_ERROR_LEVEL: Final[int] = 2
_ESLINT_WARNING_LEVEL: Final[int] = 1


def _positive(value: JsonValue) -> int | None:
    number = coerce_optional_int(value)
    return number if number is not None and number >= 1 else None


def _format_fix(fix: JsonValue) -> DiagnosticFix | None:
    if not isinstance(fix, dict):
        return None
    span = fix.get("range")
    text = coerce_optional_str(fix.get("text")) or ""
    if isinstance(span, list) and len(span) == 2:
        description = f"Replace characters {span[0]}-{span[1]} with: {text}"
    else:
        description = f"Replace with: {text}"
    return DiagnosticFix(description=description, replacement=text)


def parse_eslint(payload: JsonValue, *, sanitizer: Sanitizer | None = None) -> list[Diagnostic]:
    """Parse ESLint JSON diagnostics into :class:`Diagnostic` objects.

    Args:
        payload: JSON payload produced by ESLint when invoked with ``--format json``.
        sanitizer: Optional sanitizer applied to each message.

    Returns:
        list[Diagnostic]: Diagnostics derived from the ESLint result set.
    """
    items = payload if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes, bytearray)) else []
    results: list[Diagnostic] = []
    for entry in items:
        if not isinstance(entry, dict):
            continue
        path = coerce_optional_str(entry.get("filePath")) or coerce_optional_str(entry.get("filename"))
        messages = entry.get("messages")
        if not path or not isinstance(messages, Sequence):
            continue
        for message in messages:
            if not isinstance(message, dict):
                continue
            severity_level = coerce_optional_int(message.get("severity"))
            if severity_level is None:
                severity_level = _ESLINT_WARNING_LEVEL
            if severity_level == _ESLINT_ERROR_LEVEL:
                sev_enum = Severity.ERROR
            elif severity_level == _ESLINT_WARNING_LEVEL:
                sev_enum = Severity.WARNING
            else:
                sev_enum = Severity.INFO
            text = (coerce_optional_str(message.get("message")) or "").strip()
            if sanitizer is not None:
                text = sanitizer.sanitize(text)
            results.append(
                create_diagnostic(
                    DiagnosticSource.ESLINT,
                    path,
                    max(coerce_optional_int(message.get("line")) or 1, 1),
                    max(coerce_optional_int(message.get("column")) or 1, 1),
                    sev_enum,
                    coerce_optional_str(message.get("ruleId")),
                    text,
                    end_line=_positive(message.get("endLine")),
                    end_column=_positive(message.get("endColumn")),
                    fix=_format_fix(message.get("fix")),
                ),
            )
    return results


class EslintSource(CommandSource):
    """Collect diagnostics by running ``eslint --format json``."""

    source = DiagnosticSource.ESLINT
    default_command = ("eslint",)

    def build_args(self, config: CollectionConfig) -> list[str]:
        args = ["--format", "json", "--no-error-on-unmatched-pattern"]
        if config.config_path is not None:
            args.extend(["--config", str(config.config_path)])
        for pattern in config.ignore_patterns:
            args.extend(["--ignore-pattern", pattern])
        args.extend(config.patterns)
        return args

    def parse(self, completed: CompletedProcess[str], config: CollectionConfig) -> list[Diagnostic]:
        stdout = (completed.stdout or "").strip()
        if not stdout:
            return []
        try:
            payload = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise DiagnosticError(
                "ESLint produced output that is not valid JSON",
                source=self.name,
                cause=exc,
            ) from exc
        return parse_eslint(payload, sanitizer=config.sanitizer())


__all__ = ["EslintSource", "parse_eslint"]
