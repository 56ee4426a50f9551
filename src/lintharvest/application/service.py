# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end reporting run: clear, collect, enrich, write."""

from __future__ import annotations

import asyncio

from ..collection.aggregation import filter_empty_groups, group_by_source_and_file
from ..collection.orchestrator import CollectionOrchestrator
from ..config import CollectionConfig, ReadErrorPolicy
from ..core.errors import DiagnosticError, FileSystemError
from ..core.logging import ContextLogger, get_logger
from ..core.models import ReportingResult
from ..filesystem.layout import OutputLayout
from ..reporting.enricher import SourceCodeEnricher
from ..reporting.writer import StructuredReportWriter


class DiagnosticApplicationService:
    """Own one reporting run from clearing old output to writing new reports."""

    def __init__(
        self,
        orchestrator: CollectionOrchestrator,
        enricher: SourceCodeEnricher,
        writer: StructuredReportWriter,
        layout: OutputLayout,
        *,
        read_error_policy: ReadErrorPolicy = ReadErrorPolicy.SKIP,
        logger: ContextLogger | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._enricher = enricher
        self._writer = writer
        self._layout = layout
        self._read_error_policy = read_error_policy
        self._logger = logger or get_logger(__name__)

    async def run(self, config: CollectionConfig) -> ReportingResult:
        """Collect diagnostics for ``config`` and persist per-file reports.

        Args:
            config: Validated collection configuration.

        Returns:
            ReportingResult: Diagnostics, statistics, and write statistics.

        Raises:
            DiagnosticError: If any step fails. Collection errors are re-raised
                unchanged; anything else is wrapped with its message preserved.
        """

        try:
            await asyncio.to_thread(self._layout.clear_all_errors)
            outcome = await self._orchestrator.generate(config)
            grouped = filter_empty_groups(group_by_source_and_file(outcome.diagnostics))
            reports = await self._enricher.enrich_all(grouped, on_read_error=self._read_error_policy)
            try:
                write_stats = await self._writer.write(reports)
            except FileSystemError as exc:
                raise DiagnosticError(
                    f"Failed to write report: {exc.message}",
                    context=dict(exc.context),
                    cause=exc,
                ) from exc
        except DiagnosticError:
            raise
        except Exception as exc:
            raise DiagnosticError(
                f"Failed to generate and write report: {exc}",
                cause=exc,
            ) from exc

        self._logger.info(
            "Report written",
            extra={
                "diagnostics": len(outcome.diagnostics),
                "files": write_stats.files_written,
                "bytes": write_stats.bytes_written,
            },
        )
        return ReportingResult(
            diagnostics=outcome.diagnostics,
            stats=outcome.stats,
            source_stats=outcome.source_stats,
            write_stats=write_stats,
        )


__all__ = ["DiagnosticApplicationService"]
