# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point for diagnostic reporting."""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from ..application.service import DiagnosticApplicationService
from ..config import CollectionConfig, ReporterSettings, build_collection_config, load_settings
from ..core.errors import LintHarvestError, ValidationError
from ..core.logging import configure_logging
from ..core.models import ReportingResult
from ..reporting.summary import render_summary
from ..runtime.container import APPLICATION, build_services
from .shared import EXIT_DIAGNOSTICS, EXIT_FATAL, EXIT_SUCCESS, CLIError, CLILogger, build_cli_logger

app = typer.Typer(
    name="lintharvest",
    help="Collect diagnostics from lint, type-check, and test tools into per-file reports.",
    no_args_is_help=True,
    add_completion=False,
)


class RunTarget(str, Enum):
    """Integrations selectable through ``--run``."""

    ESLINT = "eslint"
    TYPESCRIPT = "typescript"
    VITEST = "vitest"
    ALL = "all"


def source_flags(target: RunTarget | None) -> dict[str, bool]:
    """Return the enable flags selected by ``--run``.

    ``None`` keeps the configured defaults, which enable every integration.
    """

    if target is None:
        return {}
    if target is RunTarget.ALL:
        return {"eslint": True, "typescript": True, "vitest": True}
    return {name.value: name is target for name in (RunTarget.ESLINT, RunTarget.TYPESCRIPT, RunTarget.VITEST)}


def _format_validation(exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(part) for part in issue.get('loc', ()))}: {issue.get('msg')}" for issue in exc.issues
    )
    return f"{exc.message}: {details}" if details else exc.message


def _prepare(
    *,
    root: Path,
    run: RunTarget | None,
    output: Path | None,
    timeout: int | None,
    patterns: list[str] | None,
) -> tuple[ReporterSettings, CollectionConfig]:
    if not root.is_dir():
        raise CLIError(f"Project root {root} is not a directory")
    settings = load_settings(root)
    if output is not None:
        settings.output_dir = output
    config = build_collection_config(
        patterns=tuple(patterns) if patterns else settings.patterns,
        root_path=settings.root_path,
        concurrency=settings.concurrency,
        timeout=settings.timeout if timeout is None else timeout,
        sanitize=settings.sanitize,
        sanitize_paths=settings.sanitize_paths,
        sanitize_messages=settings.sanitize_messages,
        **source_flags(run),
    )
    return settings, config


def _run_report(settings: ReporterSettings, config: CollectionConfig) -> ReportingResult:
    container = build_services(settings)
    service = container.resolve_as(APPLICATION, DiagnosticApplicationService)
    return asyncio.run(service.run(config))


def _report_exit_code(result: ReportingResult, *, exit_on_error: bool, logger: CLILogger) -> int:
    stats = result.source_stats
    if stats.failed:
        logger.warn(f"{stats.failed} of {stats.total} integration(s) failed: {', '.join(stats.failed_sources)}")
    if result.has_errors():
        logger.fail(f"{result.stats.error_count} error(s) found")
        return EXIT_DIAGNOSTICS if exit_on_error else EXIT_SUCCESS
    logger.ok(f"No errors found ({result.stats.total_count} diagnostic(s))")
    return EXIT_SUCCESS


@app.command("report")
def report(
    run: Annotated[
        RunTarget | None,
        typer.Option("--run", help="Integration to run; defaults to all of them."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Directory receiving the structured reports."),
    ] = None,
    timeout: Annotated[
        int | None,
        typer.Option("--timeout", "-t", min=0, help="Per-integration timeout in milliseconds (0 disables)."),
    ] = None,
    patterns: Annotated[
        list[str] | None,
        typer.Option("--patterns", "-p", help="Glob pattern of files to check; repeatable."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    exit_on_error: Annotated[
        bool,
        typer.Option("--exit-on-error/--no-exit-on-error", help="Exit with status 1 when errors are found."),
    ] = True,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Project root; defaults to the current directory.", file_okay=False),
    ] = None,
) -> None:
    """Collect diagnostics and write one JSON report per file."""

    configure_logging(verbose=verbose)
    logger = build_cli_logger(emoji=True, debug=verbose)
    root = (cwd or Path.cwd()).resolve()
    logger.debug(f"root={root} run={run.value if run else 'default'}")
    try:
        settings, config = _prepare(root=root, run=run, output=output, timeout=timeout, patterns=patterns)
        result = _run_report(settings, config)
    except ValidationError as exc:
        logger.fail(_format_validation(exc))
        raise typer.Exit(code=EXIT_FATAL) from exc
    except LintHarvestError as exc:
        logger.report_error(exc)
        raise typer.Exit(code=EXIT_FATAL) from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    render_summary(result, logger.console)
    logger.info(f"Reports written to {settings.resolved_output_dir}")
    raise typer.Exit(code=_report_exit_code(result, exit_on_error=exit_on_error, logger=logger))


app.command("diagnostics", help="Alias for 'report'.")(report)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["RunTarget", "app", "main", "report", "source_flags"]
