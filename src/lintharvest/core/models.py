# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the lintharvest package."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .severity import Severity

UNKNOWN_CODE: Final[str] = "unknown"
DEFAULT_ENCODING: Final[str] = "utf-8"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(UTC)


class DiagnosticSource(str, Enum):
    """Enumerate the integrations able to emit diagnostics."""

    ESLINT = "eslint"
    TYPESCRIPT = "typescript"
    VITEST = "vitest"


def diagnostic_id(
    source: DiagnosticSource | str,
    file_path: str,
    line: int,
    column: int,
    code: str,
) -> str:
    """Return the deterministic identity of a diagnostic.

    Args:
        source: Integration that reported the diagnostic.
        file_path: Path reported by the integration.
        line: 1-based line number.
        column: 1-based column number.
        code: Rule or diagnostic code.

    Returns:
        str: Identity formatted as ``source:file_path:line:column:code``.
    """

    source_value = source.value if isinstance(source, DiagnosticSource) else str(source)
    return f"{source_value}:{file_path}:{line}:{column}:{code}"


def _normalise_code(value: object) -> str:
    if value is None or not str(value).strip():
        return UNKNOWN_CODE
    return str(value)


class DiagnosticFix(BaseModel):
    """Describe a suggested fix attached to a diagnostic."""

    model_config = ConfigDict(frozen=True)

    description: str
    replacement: str


class Diagnostic(BaseModel):
    """Standardize diagnostics returned by integrations into a common schema.

    The identity (``id``) is derived from ``source``, ``file_path``, ``line``,
    ``column`` and ``code`` when not supplied, so re-collecting the same issue
    always yields the same identity regardless of message text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source: DiagnosticSource
    file_path: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    end_line: int | None = Field(default=None, ge=1)
    end_column: int | None = Field(default=None, ge=1)
    severity: Severity
    code: str = UNKNOWN_CODE
    message: str
    detail: str | None = None
    fix: DiagnosticFix | None = None
    timestamp: datetime = Field(default_factory=utc_now)

    @model_validator(mode="before")
    @classmethod
    def _derive_identity(cls, data: object) -> object:
        """Populate ``id`` from the identity tuple when the caller omits it.

        Args:
            data: Raw constructor payload.

        Returns:
            object: Payload including an ``id`` entry.
        """

        if not isinstance(data, Mapping) or data.get("id"):
            return data
        payload = dict(data)
        code = _normalise_code(payload.get("code"))
        payload["code"] = code
        payload["id"] = diagnostic_id(
            payload.get("source", ""),
            str(payload.get("file_path", "")),
            int(payload.get("line", 0) or 0),
            int(payload.get("column", 0) or 0),
            code,
        )
        return payload

    @field_validator("code", mode="before")
    @classmethod
    def _fallback_code(cls, value: object) -> str:
        return _normalise_code(value)

    @field_validator("timestamp")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def identity(self) -> tuple[str, str, int, int, str]:
        """Return the tuple that determines the diagnostic identity."""

        return (self.source.value, self.file_path, self.line, self.column, self.code)


def create_diagnostic(
    source: DiagnosticSource | str,
    file_path: str,
    line: int,
    column: int,
    severity: Severity | str,
    code: str | None,
    message: str,
    *,
    end_line: int | None = None,
    end_column: int | None = None,
    detail: str | None = None,
    fix: DiagnosticFix | None = None,
) -> Diagnostic:
    """Build a :class:`Diagnostic` stamping its identity and creation time.

    Args:
        source: Integration that reported the diagnostic.
        file_path: Path reported by the integration.
        line: 1-based line number.
        column: 1-based column number.
        severity: Severity enum or label.
        code: Rule code; ``None`` or blank falls back to ``"unknown"``.
        message: Human-readable message.
        end_line: Optional end line for range diagnostics.
        end_column: Optional end column for range diagnostics.
        detail: Optional elaboration of ``message``.
        fix: Optional suggested fix.

    Returns:
        Diagnostic: Immutable diagnostic instance.
    """

    resolved_code = _normalise_code(code)
    return Diagnostic(
        id=diagnostic_id(source, file_path, line, column, resolved_code),
        source=DiagnosticSource(source),
        file_path=file_path,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        severity=Severity(severity),
        code=resolved_code,
        message=message,
        detail=detail,
        fix=fix,
        timestamp=utc_now(),
    )


class DiagnosticStatistics(BaseModel):
    """Statistics snapshot derived from an accumulated diagnostic set."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utc_now)
    total_count: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    note_count: int = 0
    total_by_file: dict[str, int] = Field(default_factory=dict)
    total_by_severity: dict[Severity, int] = Field(
        default_factory=lambda: {severity: 0 for severity in Severity},
    )
    total_by_code: dict[str, int] = Field(default_factory=dict)


class FileReportMetadata(BaseModel):
    """Metadata attached to a per-file diagnostic report."""

    model_config = ConfigDict(frozen=True)

    instrument: DiagnosticSource
    timestamp: datetime = Field(default_factory=utc_now)
    diagnostic_count: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0


class FileReport(BaseModel):
    """Source text, diagnostics, and metadata for one (source, file) pair."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    absolute_path: str
    source_code: str = ""
    encoding: str = DEFAULT_ENCODING
    line_count: int = 0
    size: int = 0
    diagnostics: tuple[Diagnostic, ...] = ()
    metadata: FileReportMetadata


@dataclass(frozen=True, slots=True)
class SourceStatistics:
    """Summarise how the active diagnostic sources fared during one run.

    ``failed`` counts every unsuccessful source, timeouts included;
    ``timed_out`` is the timeout subset of ``failed``. ``sources`` lists every
    active source in registration order.
    """

    total: int = 0
    successful: int = 0
    failed: int = 0
    timed_out: int = 0
    sources: tuple[str, ...] = ()
    succeeded_sources: tuple[str, ...] = ()
    failed_sources: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WriteStats:
    """Statistics describing a structured report write."""

    files_written: int
    bytes_written: int
    duration: float
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True, slots=True)
class CollectionOutcome:
    """Diagnostics and statistics produced by one collection run."""

    diagnostics: tuple[Diagnostic, ...]
    stats: DiagnosticStatistics
    source_stats: SourceStatistics


@dataclass(frozen=True, slots=True)
class ReportingResult:
    """End-to-end result of a reporting run including write statistics."""

    diagnostics: tuple[Diagnostic, ...]
    stats: DiagnosticStatistics
    source_stats: SourceStatistics
    write_stats: WriteStats

    def has_errors(self) -> bool:
        """Return whether any error-severity diagnostic was collected."""

        return self.stats.error_count > 0


__all__ = [
    "DEFAULT_ENCODING",
    "UNKNOWN_CODE",
    "CollectionOutcome",
    "Diagnostic",
    "DiagnosticFix",
    "DiagnosticSource",
    "DiagnosticStatistics",
    "FileReport",
    "FileReportMetadata",
    "ReportingResult",
    "SourceStatistics",
    "WriteStats",
    "create_diagnostic",
    "diagnostic_id",
    "utc_now",
]
