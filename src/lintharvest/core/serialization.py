# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for converting diagnostics and file reports to serializable data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from .errors import ValidationError
from .models import Diagnostic, DiagnosticFix, DiagnosticSource, FileReport, FileReportMetadata
from .severity import Severity

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]
type SerializableMapping = dict[str, JsonValue]


def format_timestamp(value: datetime) -> str:
    """Return ``value`` as an ISO-8601 UTC string with millisecond precision."""

    aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return aware.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: JsonValue) -> datetime:
    """Parse an ISO-8601 timestamp produced by :func:`format_timestamp`.

    Raises:
        ValueError: If ``value`` is not a valid ISO-8601 string.
    """

    if not isinstance(value, str):
        raise ValueError(f"timestamp must be an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def to_persistence(diagnostic: Diagnostic) -> SerializableMapping:
    """Convert a diagnostic into its persisted JSON representation.

    Args:
        diagnostic: Diagnostic to serialise.

    Returns:
        SerializableMapping: camelCase payload retaining ``id`` and an ISO timestamp.
    """

    payload: SerializableMapping = {
        "id": diagnostic.id,
        "source": diagnostic.source.value,
        "filePath": diagnostic.file_path,
        "line": diagnostic.line,
        "column": diagnostic.column,
        "endLine": diagnostic.end_line,
        "endColumn": diagnostic.end_column,
        "severity": diagnostic.severity.value,
        "code": diagnostic.code,
        "message": diagnostic.message,
        "detail": diagnostic.detail,
        "timestamp": format_timestamp(diagnostic.timestamp),
    }
    if diagnostic.fix is not None:
        payload["fix"] = {
            "description": diagnostic.fix.description,
            "replacement": diagnostic.fix.replacement,
        }
    return payload


def from_persistence(data: Mapping[str, JsonValue]) -> Diagnostic:
    """Rehydrate a :class:`Diagnostic` from :func:`to_persistence` output.

    The persisted ``id`` and ``timestamp`` are kept verbatim rather than
    recomputed.

    Args:
        data: Persisted diagnostic payload.

    Returns:
        Diagnostic: Reconstructed diagnostic.

    Raises:
        ValidationError: If the payload is missing required fields or carries
            invalid values.
    """

    try:
        fix_payload = data.get("fix")
        fix = None
        if isinstance(fix_payload, Mapping):
            fix = DiagnosticFix(
                description=str(fix_payload.get("description", "")),
                replacement=str(fix_payload.get("replacement", "")),
            )
        return Diagnostic(
            id=str(data["id"]),
            source=DiagnosticSource(str(data["source"])),
            file_path=str(data["filePath"]),
            line=safe_int(data.get("line"), default=1),
            column=safe_int(data.get("column"), default=1),
            end_line=coerce_optional_int(data.get("endLine")),
            end_column=coerce_optional_int(data.get("endColumn")),
            severity=Severity(str(data["severity"])),
            code=coerce_optional_str(data.get("code")),
            message=str(data.get("message", "")),
            detail=coerce_optional_str(data.get("detail")),
            fix=fix,
            timestamp=parse_timestamp(data.get("timestamp")),
        )
    except (KeyError, ValueError) as exc:
        raise ValidationError(
            "Persisted diagnostic payload is invalid",
            issues=[{"loc": ("diagnostic",), "msg": str(exc), "type": type(exc).__name__}],
            cause=exc,
        ) from exc


def serialize_file_report(report: FileReport) -> SerializableMapping:
    """Return the JSON payload persisted for ``report``."""

    metadata = report.metadata
    return {
        "filePath": report.file_path,
        "absolutePath": report.absolute_path,
        "sourceCode": report.source_code,
        "encoding": report.encoding,
        "lineCount": report.line_count,
        "size": report.size,
        "diagnostics": [to_persistence(diagnostic) for diagnostic in report.diagnostics],
        "metadata": {
            "instrument": metadata.instrument.value,
            "timestamp": format_timestamp(metadata.timestamp),
            "diagnosticCount": metadata.diagnostic_count,
            "errorCount": metadata.error_count,
            "warningCount": metadata.warning_count,
            "infoCount": metadata.info_count,
        },
    }


def deserialize_file_report(data: Mapping[str, JsonValue]) -> FileReport:
    """Rehydrate a :class:`FileReport` from :func:`serialize_file_report` output."""

    metadata = data.get("metadata")
    if not isinstance(metadata, Mapping):
        raise ValidationError(
            "Persisted file report is missing metadata",
            issues=[{"loc": ("metadata",), "msg": "field required", "type": "missing"}],
        )
    diagnostics = [
        from_persistence(entry) for entry in _coerce_mapping_sequence(data.get("diagnostics"))
    ]
    return FileReport(
        file_path=str(data.get("filePath", "")),
        absolute_path=str(data.get("absolutePath", "")),
        source_code=str(data.get("sourceCode", "")),
        encoding=str(data.get("encoding", "utf-8")),
        line_count=safe_int(data.get("lineCount")),
        size=safe_int(data.get("size")),
        diagnostics=tuple(diagnostics),
        metadata=FileReportMetadata(
            instrument=DiagnosticSource(str(metadata.get("instrument"))),
            timestamp=parse_timestamp(metadata.get("timestamp")),
            diagnostic_count=safe_int(metadata.get("diagnosticCount")),
            error_count=safe_int(metadata.get("errorCount")),
            warning_count=safe_int(metadata.get("warningCount")),
            info_count=safe_int(metadata.get("infoCount")),
        ),
    )


def safe_int(value: JsonValue, default: int = 0) -> int:
    """Return ``value`` as ``int`` when possible, otherwise ``default``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def coerce_optional_int(value: JsonValue) -> int | None:
    """Return an optional integer parsed from ``value`` when feasible."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def coerce_optional_str(value: JsonValue) -> str | None:
    """Return a string representation of ``value`` or ``None`` when unset."""
    if value is None:
        return None
    return str(value)


def _coerce_mapping_sequence(value: JsonValue) -> list[Mapping[str, JsonValue]]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


__all__ = [
    "JsonValue",
    "SerializableMapping",
    "coerce_optional_int",
    "coerce_optional_str",
    "deserialize_file_report",
    "format_timestamp",
    "from_persistence",
    "parse_timestamp",
    "safe_int",
    "serialize_file_report",
    "to_persistence",
]
