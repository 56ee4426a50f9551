# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Attach source text and per-file metadata to grouped diagnostics."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..config import ReadErrorPolicy
from ..core.errors import DiagnosticError, FileSystemError
from ..core.logging import ContextLogger, get_logger
from ..core.models import DEFAULT_ENCODING, Diagnostic, DiagnosticSource, FileReport, FileReportMetadata, utc_now
from ..core.severity import Severity
from ..filesystem.local import FileSystem
from ..filesystem.paths import absolute_report_path

type EnrichedReports = dict[DiagnosticSource, list[FileReport]]


def build_metadata(diagnostics: Sequence[Diagnostic], source: DiagnosticSource) -> FileReportMetadata:
    """Return report metadata counted from ``diagnostics`` only."""

    return FileReportMetadata(
        instrument=source,
        timestamp=utc_now(),
        diagnostic_count=len(diagnostics),
        error_count=sum(1 for diagnostic in diagnostics if diagnostic.severity is Severity.ERROR),
        warning_count=sum(1 for diagnostic in diagnostics if diagnostic.severity is Severity.WARNING),
        info_count=sum(1 for diagnostic in diagnostics if diagnostic.severity is Severity.INFO),
    )


class SourceCodeEnricher:
    """Build :class:`FileReport` objects by reading each reported file."""

    def __init__(
        self,
        file_system: FileSystem,
        root_path: Path,
        *,
        logger: ContextLogger | None = None,
    ) -> None:
        self._file_system = file_system
        self._root_path = root_path
        self._logger = logger or get_logger(__name__)

    async def enrich_file(
        self,
        file_path: str,
        diagnostics: Sequence[Diagnostic],
        source: DiagnosticSource,
        *,
        on_read_error: ReadErrorPolicy = ReadErrorPolicy.SKIP,
    ) -> FileReport:
        """Return the report for one ``(source, file)`` pair.

        Args:
            file_path: Path exactly as reported by the tool.
            diagnostics: Diagnostics reported for ``file_path``.
            source: Integration that produced the diagnostics.
            on_read_error: ``SKIP`` degrades to an empty-content report;
                ``FAIL`` propagates the read error.

        Returns:
            FileReport: Immutable report with content and metadata.

        Raises:
            FileSystemError: If the file cannot be read and the policy is ``FAIL``.
        """

        absolute_path = absolute_report_path(file_path, self._root_path)
        metadata = build_metadata(diagnostics, source)
        try:
            content = await asyncio.to_thread(self._file_system.read_text, Path(absolute_path), DEFAULT_ENCODING)
        except FileSystemError as exc:
            if on_read_error is ReadErrorPolicy.FAIL:
                raise
            self._logger.warning(
                "Unable to read source file; writing report without content",
                extra={"file": file_path, "error": str(exc.cause or exc)},
            )
            return FileReport(
                file_path=file_path,
                absolute_path=absolute_path,
                diagnostics=tuple(diagnostics),
                metadata=metadata,
            )
        return FileReport(
            file_path=file_path,
            absolute_path=absolute_path,
            source_code=content,
            encoding=DEFAULT_ENCODING,
            line_count=len(content.split("\n")),
            size=len(content.encode(DEFAULT_ENCODING)),
            diagnostics=tuple(diagnostics),
            metadata=metadata,
        )

    async def enrich_all(
        self,
        grouped: Mapping[DiagnosticSource, Mapping[str, Sequence[Diagnostic]]],
        *,
        on_read_error: ReadErrorPolicy = ReadErrorPolicy.FAIL,
    ) -> EnrichedReports:
        """Enrich every file of every source, in grouping order.

        Args:
            grouped: ``source -> file -> diagnostics`` mapping.
            on_read_error: Policy applied to each file read.

        Returns:
            EnrichedReports: Reports per source, in the order files were grouped.

        Raises:
            DiagnosticError: If any file fails to enrich under the ``FAIL``
                policy; the failing path is named in the message.
        """

        enriched: EnrichedReports = {}
        for source, files in grouped.items():
            reports: list[FileReport] = []
            for file_path, diagnostics in files.items():
                try:
                    reports.append(
                        await self.enrich_file(file_path, diagnostics, source, on_read_error=on_read_error),
                    )
                except FileSystemError as exc:
                    raise DiagnosticError(
                        f"Failed to enrich diagnostics for {file_path}: {exc.message}",
                        source=source.value,
                        context={"file_path": file_path},
                        cause=exc,
                    ) from exc
            enriched[source] = reports
        return enriched


__all__ = ["EnrichedReports", "SourceCodeEnricher", "build_metadata"]
