# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich table summarising a reporting run."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..collection.aggregation import count_by_severity, group_by_source
from ..core.models import ReportingResult
from ..core.severity import SEVERITY_ORDER, Severity

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
    Severity.NOTE: "dim",
}


def build_summary_table(result: ReportingResult) -> Table:
    """Return a table with one row per integration that ran.

    Args:
        result: Completed reporting run.

    Returns:
        Table: Status and severity counts per integration plus a totals row.
    """

    table = Table(box=box.SIMPLE, pad_edge=False, expand=False, title="Diagnostics")
    table.add_column("Integration", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for severity in SEVERITY_ORDER:
        table.add_column(severity.value.capitalize(), justify="right", style=_SEVERITY_STYLES[severity])

    by_source = group_by_source(result.diagnostics)
    for name in result.source_stats.sources:
        failed = name in result.source_stats.failed_sources
        status = Text("failed", style="bold red") if failed else Text("ok", style="bold green")
        entries = [diagnostic for source, items in by_source.items() if source.value == name for diagnostic in items]
        counts = count_by_severity(entries)
        table.add_row(name, status, *(str(counts[severity]) for severity in SEVERITY_ORDER))

    stats = result.stats
    table.add_section()
    table.add_row(
        Text("total", style="bold"),
        Text(f"{result.write_stats.files_written} files written"),
        str(stats.error_count),
        str(stats.warning_count),
        str(stats.info_count),
        str(stats.note_count),
    )
    return table


def render_summary(result: ReportingResult, console: Console) -> None:
    """Print the summary table for ``result`` to ``console``."""

    console.print(build_summary_table(result))


__all__ = ["build_summary_table", "render_summary"]
