# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persist file reports as one JSON document per reported file."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from time import perf_counter

from ..core.errors import FileSystemError
from ..core.logging import ContextLogger, get_logger
from ..core.models import DiagnosticSource, FileReport, WriteStats, utc_now
from ..core.serialization import serialize_file_report
from ..filesystem.layout import OutputLayout
from ..filesystem.paths import report_file_name


class StructuredReportWriter:
    """Write reports under ``<output>/<source>/errors/<name>.json``.

    Writes happen one at a time and each file is replaced atomically.
    The first failure aborts the call.
    """

    def __init__(
        self,
        layout: OutputLayout,
        root_path: Path,
        *,
        logger: ContextLogger | None = None,
    ) -> None:
        self._layout = layout
        self._root_path = root_path
        self._logger = logger or get_logger(__name__)

    def target_path(self, source: DiagnosticSource, report: FileReport) -> Path:
        return self._layout.errors_directory(source) / report_file_name(report.file_path, base_dir=self._root_path)

    async def write(self, reports: Mapping[DiagnosticSource, Sequence[FileReport]]) -> WriteStats:
        """Persist ``reports`` and return write statistics.

        Args:
            reports: Reports grouped by source.

        Returns:
            WriteStats: Files and bytes written plus elapsed milliseconds.

        Raises:
            FileSystemError: If a directory or report cannot be written.
        """

        started = perf_counter()
        files_written = 0
        bytes_written = 0
        file_system = self._layout.file_system
        for source, file_reports in reports.items():
            if not file_reports:
                continue
            await asyncio.to_thread(file_system.ensure_dir, self._layout.errors_directory(source))
            for report in file_reports:
                target = self.target_path(source, report)
                try:
                    written = await asyncio.to_thread(
                        file_system.write_json,
                        target,
                        serialize_file_report(report),
                        atomic=True,
                        ensure_dir=True,
                    )
                except FileSystemError as exc:
                    raise FileSystemError(
                        f"Failed to write file report for {report.file_path}: {exc.message}",
                        path=str(target),
                        context={"file_path": report.file_path, "source": source.value},
                        cause=exc,
                    ) from exc
                files_written += 1
                bytes_written += written
            self._logger.info(
                f"Wrote {len(file_reports)} diagnostic files for {source.value}",
                extra={"source": source.value, "count": len(file_reports)},
            )
        return WriteStats(
            files_written=files_written,
            bytes_written=bytes_written,
            duration=(perf_counter() - started) * 1000,
            timestamp=utc_now(),
        )


__all__ = ["StructuredReportWriter"]
