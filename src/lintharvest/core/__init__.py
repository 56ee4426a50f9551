# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Core diagnostic model, severity scale, and error taxonomy."""

from __future__ import annotations

from .errors import (
    AllSourcesFailedError,
    CollectionError,
    ConfigurationError,
    DiagnosticError,
    FileSystemError,
    LintHarvestError,
    NoSourcesEnabledError,
    SourceTimeoutError,
    ValidationError,
)
from .models import (
    CollectionOutcome,
    Diagnostic,
    DiagnosticFix,
    DiagnosticSource,
    DiagnosticStatistics,
    FileReport,
    FileReportMetadata,
    ReportingResult,
    SourceStatistics,
    WriteStats,
    create_diagnostic,
    diagnostic_id,
)
from .sanitize import Sanitizer
from .severity import Severity, coerce_severity

__all__ = [
    "AllSourcesFailedError",
    "CollectionError",
    "CollectionOutcome",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticError",
    "DiagnosticFix",
    "DiagnosticSource",
    "DiagnosticStatistics",
    "FileReport",
    "FileReportMetadata",
    "FileSystemError",
    "LintHarvestError",
    "NoSourcesEnabledError",
    "ReportingResult",
    "Sanitizer",
    "Severity",
    "SourceStatistics",
    "SourceTimeoutError",
    "ValidationError",
    "WriteStats",
    "coerce_severity",
    "create_diagnostic",
    "diagnostic_id",
]
