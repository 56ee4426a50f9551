# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pure helpers combining and grouping diagnostics.

None of these functions sort or de-duplicate: output order always follows
input order, and two diagnostics sharing an ``id`` are both kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..core.models import Diagnostic, DiagnosticSource
from ..core.severity import SEVERITY_ORDER, Severity

type FileGroups = dict[str, list[Diagnostic]]
type GroupedDiagnostics = dict[DiagnosticSource, FileGroups]


def aggregate(sources: Iterable[Iterable[Diagnostic]]) -> list[Diagnostic]:
    """Concatenate per-source diagnostic lists preserving order.

    Args:
        sources: Diagnostic lists in adapter-registration order.

    Returns:
        list[Diagnostic]: All diagnostics, source by source.
    """

    return [diagnostic for diagnostics in sources for diagnostic in diagnostics]


def count_by_severity(diagnostics: Iterable[Diagnostic]) -> dict[Severity, int]:
    """Return counts for every severity level, zero-filled."""

    counts = {severity: 0 for severity in SEVERITY_ORDER}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1
    return counts


def group_by_source(diagnostics: Iterable[Diagnostic]) -> dict[DiagnosticSource, list[Diagnostic]]:
    """Group diagnostics by source; every known source is present."""

    grouped: dict[DiagnosticSource, list[Diagnostic]] = {source: [] for source in DiagnosticSource}
    for diagnostic in diagnostics:
        grouped[diagnostic.source].append(diagnostic)
    return grouped


def group_by_file(diagnostics: Iterable[Diagnostic]) -> FileGroups:
    """Group diagnostics by ``file_path`` in first-seen order."""

    grouped: FileGroups = {}
    for diagnostic in diagnostics:
        grouped.setdefault(diagnostic.file_path, []).append(diagnostic)
    return grouped


def group_by_source_and_file(diagnostics: Iterable[Diagnostic]) -> GroupedDiagnostics:
    """Return a two-level ``source -> file -> diagnostics`` mapping.

    Sources without diagnostics map to an empty dictionary; use
    :func:`filter_empty_groups` to drop them.
    """

    return {source: group_by_file(entries) for source, entries in group_by_source(diagnostics).items()}


def filter_empty_groups(grouped: Mapping[DiagnosticSource, FileGroups]) -> GroupedDiagnostics:
    """Drop sources whose file mapping is empty."""

    return {source: files for source, files in grouped.items() if files}


__all__ = [
    "FileGroups",
    "GroupedDiagnostics",
    "aggregate",
    "count_by_severity",
    "filter_empty_groups",
    "group_by_file",
    "group_by_source",
    "group_by_source_and_file",
]
