# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""TypeScript compiler diagnostic source."""

from __future__ import annotations

import re
from collections.abc import Sequence
from subprocess import CompletedProcess
from typing import ClassVar

from ..config import CollectionConfig
from ..core.models import Diagnostic, DiagnosticSource, create_diagnostic
from ..core.sanitize import Sanitizer
from ..core.severity import Severity, coerce_severity
from .base import CommandSource

_TSC_PATTERN = re.compile(
    r"^(?P<file>[^:(\n]+)\((?P<line>\d+),(?P<col>\d+)\):\s*"
    r"(?P<severity>error|warning)\s*(?P<code>[A-Z]+\d+)?\s*:?\s*(?P<message>.+)$",
)


def parse_tsc(stdout: Sequence[str], *, sanitizer: Sanitizer | None = None) -> list[Diagnostic]:
    """Parse TypeScript compiler textual diagnostics.

    Continuation lines (indented message chains) are attached to the
    preceding diagnostic as ``detail``.

    Args:
        stdout: Lines printed by ``tsc --pretty false``.
        sanitizer: Optional sanitizer applied to messages and details.

    Returns:
        list[Diagnostic]: Diagnostics surfaced by ``tsc`` execution.
    """
    pending: list[tuple[dict[str, str], list[str]]] = []
    for line in stdout:
        match = _TSC_PATTERN.match(line.strip())
        if match:
            pending.append((match.groupdict(), []))
        elif pending and line.startswith((" ", "\t")) and line.strip():
            pending[-1][1].append(line.strip())
    results: list[Diagnostic] = []
    for groups, details in pending:
        severity = coerce_severity(groups["severity"], default=Severity.WARNING)
        message = groups["message"].strip()
        detail = "\n".join(details) or None
        if sanitizer is not None:
            message = sanitizer.sanitize(message)
            detail = sanitizer.sanitize_optional(detail)
        results.append(
            create_diagnostic(
                DiagnosticSource.TYPESCRIPT,
                groups["file"].strip(),
                int(groups["line"]),
                int(groups["col"]),
                severity,
                groups.get("code"),
                message,
                detail=detail,
            ),
        )
    return results


class TypeScriptSource(CommandSource):
    """Collect diagnostics by running ``tsc --noEmit --pretty false``."""

    source = DiagnosticSource.TYPESCRIPT
    default_command = ("tsc",)
    # tsc exits 1 or 2 when diagnostics are present depending on emit state.
    accepted_returncodes: ClassVar[frozenset[int]] = frozenset({0, 1, 2})

    def build_args(self, config: CollectionConfig) -> list[str]:
        args = ["--noEmit", "--pretty", "false"]
        if config.config_path is not None:
            args.extend(["-p", str(config.config_path)])
        return args

    def parse(self, completed: CompletedProcess[str], config: CollectionConfig) -> list[Diagnostic]:
        return parse_tsc((completed.stdout or "").splitlines(), sanitizer=config.sanitizer())


__all__ = ["TypeScriptSource", "parse_tsc"]
