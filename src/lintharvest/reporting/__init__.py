# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Report enrichment, persistence, and console summaries."""

from __future__ import annotations

from .enricher import EnrichedReports, SourceCodeEnricher, build_metadata
from .summary import build_summary_table, render_summary
from .writer import StructuredReportWriter

__all__ = [
    "EnrichedReports",
    "SourceCodeEnricher",
    "StructuredReportWriter",
    "build_metadata",
    "build_summary_table",
    "render_summary",
]
