# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Directory layout of persisted diagnostic reports."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..core.models import DiagnosticSource
from .local import FileSystem

ERRORS_DIRNAME: Final[str] = "errors"


@dataclass(frozen=True, slots=True)
class OutputLayout:
    """Resolve ``<output>/<source>/errors/`` directories for each integration."""

    output_dir: Path
    file_system: FileSystem

    def source_directory(self, source: DiagnosticSource) -> Path:
        return self.output_dir / source.value

    def errors_directory(self, source: DiagnosticSource) -> Path:
        return self.source_directory(source) / ERRORS_DIRNAME

    def clear_errors(self, source: DiagnosticSource) -> None:
        self.file_system.remove_dir(self.errors_directory(source))

    def clear_all_errors(self) -> None:
        """Remove the errors directory of every known source.

        Missing directories are ignored, so repeated calls are harmless.
        """

        for source in DiagnosticSource:
            self.clear_errors(source)


__all__ = ["ERRORS_DIRNAME", "OutputLayout"]
