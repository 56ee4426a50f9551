# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collection orchestration, aggregation, and running statistics."""

from __future__ import annotations

from .aggregation import (
    FileGroups,
    GroupedDiagnostics,
    aggregate,
    count_by_severity,
    filter_empty_groups,
    group_by_file,
    group_by_source,
    group_by_source_and_file,
)
from .analytics import DiagnosticAnalytics
from .orchestrator import CollectionOrchestrator, SourceOutcome, build_source_statistics, is_source_enabled

__all__ = [
    "CollectionOrchestrator",
    "DiagnosticAnalytics",
    "FileGroups",
    "GroupedDiagnostics",
    "SourceOutcome",
    "aggregate",
    "build_source_statistics",
    "count_by_severity",
    "filter_empty_groups",
    "group_by_file",
    "group_by_source",
    "group_by_source_and_file",
    "is_source_enabled",
]
