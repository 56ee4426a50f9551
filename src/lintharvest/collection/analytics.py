# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Running statistics over accumulated diagnostics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from ..core.models import Diagnostic, DiagnosticStatistics, utc_now
from ..core.severity import Severity
from .aggregation import count_by_severity


class DiagnosticAnalytics:
    """Accumulate diagnostics and keep a statistics snapshot in sync.

    Statistics are recomputed from the full accumulated list after every
    :meth:`collect` or :meth:`collect_all`, so the snapshot always equals a
    fresh computation over :attr:`diagnostics`.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._stats = DiagnosticStatistics()

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Return a copy of the accumulated diagnostics."""

        return list(self._diagnostics)

    def collect(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)
        self._recalculate()

    def collect_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._diagnostics.extend(diagnostics)
        self._recalculate()

    def get_snapshot(self) -> DiagnosticStatistics:
        """Return a deep copy of the current statistics.

        Returns:
            DiagnosticStatistics: Snapshot whose mutable maps are detached from
            the accumulator.
        """

        return self._stats.model_copy(deep=True)

    def reset(self) -> None:
        self._diagnostics.clear()
        self._stats = DiagnosticStatistics()

    @staticmethod
    def calculate_severity_counts(diagnostics: Iterable[Diagnostic]) -> dict[Severity, int]:
        return count_by_severity(diagnostics)

    @staticmethod
    def calculate(diagnostics: Iterable[Diagnostic]) -> DiagnosticStatistics:
        """Compute statistics for ``diagnostics`` without touching any state.

        Args:
            diagnostics: Diagnostics to summarise.

        Returns:
            DiagnosticStatistics: Freshly computed statistics.
        """

        entries = list(diagnostics)
        by_severity = count_by_severity(entries)
        return DiagnosticStatistics(
            timestamp=utc_now(),
            total_count=len(entries),
            error_count=by_severity[Severity.ERROR],
            warning_count=by_severity[Severity.WARNING],
            info_count=by_severity[Severity.INFO],
            note_count=by_severity[Severity.NOTE],
            total_by_file=dict(Counter(diagnostic.file_path for diagnostic in entries)),
            total_by_severity=by_severity,
            total_by_code=dict(Counter(diagnostic.code for diagnostic in entries)),
        )

    def _recalculate(self) -> None:
        self._stats = self.calculate(self._diagnostics)


__all__ = ["DiagnosticAnalytics"]
