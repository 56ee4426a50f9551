# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concurrent multi-source diagnostic collection."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import partial
from time import monotonic
from typing import Final

from ..config import CollectionConfig
from ..core.errors import AllSourcesFailedError, NoSourcesEnabledError, SourceTimeoutError
from ..core.logging import ContextLogger, get_logger
from ..core.models import CollectionOutcome, Diagnostic, SourceStatistics
from ..sources.base import SourceAdapter
from .aggregation import aggregate
from .analytics import DiagnosticAnalytics

_FLAGGED_KEYWORDS: Final[tuple[str, ...]] = ("eslint", "typescript", "vitest")


@dataclass(slots=True)
class SourceOutcome:
    """Settled result of one adapter call."""

    name: str
    position: int
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: BaseException | None = None
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, SourceTimeoutError)


def is_source_enabled(name: str, config: CollectionConfig) -> bool:
    """Return whether the adapter called ``name`` is active under ``config``.

    An adapter whose name contains a known source keyword follows that
    keyword's enable flag; any other adapter is always active.

    Args:
        name: Adapter name.
        config: Collection configuration carrying the enable flags.

    Returns:
        bool: ``True`` when the adapter should run.
    """

    lowered = name.lower()
    flags = config.enabled_flags()
    for keyword in _FLAGGED_KEYWORDS:
        if keyword in lowered:
            return flags[keyword]
    return True


def build_source_statistics(outcomes: Sequence[SourceOutcome]) -> SourceStatistics:
    """Summarise settled outcomes; ``failed`` includes timeouts."""

    succeeded = tuple(outcome.name for outcome in outcomes if outcome.succeeded)
    failed = tuple(outcome.name for outcome in outcomes if not outcome.succeeded)
    return SourceStatistics(
        total=len(outcomes),
        successful=len(succeeded),
        failed=len(failed),
        timed_out=sum(1 for outcome in outcomes if outcome.timed_out),
        sources=tuple(outcome.name for outcome in sorted(outcomes, key=lambda item: item.position)),
        succeeded_sources=succeeded,
        failed_sources=failed,
    )


class CollectionOrchestrator:
    """Run every active source concurrently and merge their diagnostics.

    Each source runs under its own timeout. A failing or timed-out source
    never cancels its siblings; the run only fails when no source succeeds.
    """

    def __init__(
        self,
        sources: Sequence[SourceAdapter],
        analytics: DiagnosticAnalytics,
        *,
        logger: ContextLogger | None = None,
    ) -> None:
        self._sources = tuple(sources)
        self._analytics = analytics
        self._logger = logger or get_logger(__name__)
        self._abandoned: set[asyncio.Task[list[Diagnostic]]] = set()

    @property
    def sources(self) -> tuple[SourceAdapter, ...]:
        return self._sources

    def active_sources(self, config: CollectionConfig) -> list[SourceAdapter]:
        return [source for source in self._sources if is_source_enabled(source.name, config)]

    async def generate(self, config: CollectionConfig) -> CollectionOutcome:
        """Collect diagnostics from all active sources.

        Args:
            config: Validated collection configuration.

        Returns:
            CollectionOutcome: Merged diagnostics in registration order with
            diagnostic and per-source statistics.

        Raises:
            NoSourcesEnabledError: If configuration leaves no source active.
            AllSourcesFailedError: If every active source failed or timed out.
        """

        active = self.active_sources(config)
        if not active:
            raise NoSourcesEnabledError(
                "No diagnostic sources enabled",
                context={"registered": [source.name for source in self._sources]},
            )

        names = [source.name for source in active]
        self._logger.info("Starting diagnostic collection", extra={"sources": ",".join(names)})
        outcomes = await self._collect_all(active, config)

        source_stats = build_source_statistics(outcomes)
        if source_stats.successful == 0:
            self._logger.error("All diagnostic sources failed", extra={"sources": ",".join(names)})
            first_error = next((outcome.error for outcome in outcomes if outcome.error is not None), None)
            raise AllSourcesFailedError(
                "All diagnostic sources failed",
                context={
                    "sources": names,
                    "errors": {outcome.name: str(outcome.error) for outcome in outcomes},
                },
                cause=first_error,
            )

        diagnostics = aggregate(outcome.diagnostics for outcome in outcomes if outcome.succeeded)
        self._analytics.reset()
        self._analytics.collect_all(diagnostics)
        stats = self._analytics.get_snapshot()
        self._logger.info(
            "Diagnostic collection completed",
            extra={
                "diagnostics": len(diagnostics),
                "successful": source_stats.successful,
                "failed": source_stats.failed,
                "timed_out": source_stats.timed_out,
            },
        )
        return CollectionOutcome(diagnostics=tuple(diagnostics), stats=stats, source_stats=source_stats)

    async def _collect_all(self, sources: Sequence[SourceAdapter], config: CollectionConfig) -> list[SourceOutcome]:
        semaphore = asyncio.Semaphore(config.concurrency)
        tasks: list[asyncio.Task[SourceOutcome]] = []
        async with asyncio.TaskGroup() as group:
            for position, source in enumerate(sources):
                tasks.append(group.create_task(self._collect_one(source, position, config, semaphore)))
        outcomes = [task.result() for task in tasks]
        return sorted(outcomes, key=lambda outcome: outcome.position)

    async def _collect_one(
        self,
        source: SourceAdapter,
        position: int,
        config: CollectionConfig,
        semaphore: asyncio.Semaphore,
    ) -> SourceOutcome:
        outcome = SourceOutcome(name=source.name, position=position)
        logger = self._logger.child(source=source.name)
        async with semaphore:
            started = monotonic()
            try:
                diagnostics = await self._await_with_timeout(source, config, logger)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                outcome.error = exc
                outcome.duration = monotonic() - started
                if outcome.timed_out:
                    logger.warning("Diagnostic source timed out", extra={"timeout_ms": config.timeout})
                else:
                    logger.warning("Diagnostic source failed", extra={"error": str(exc)})
                return outcome
        outcome.diagnostics = list(diagnostics)
        outcome.duration = monotonic() - started
        logger.info(
            "Diagnostic source completed",
            extra={"diagnostics": len(outcome.diagnostics), "seconds": f"{outcome.duration:.2f}"},
        )
        return outcome

    async def _await_with_timeout(
        self,
        source: SourceAdapter,
        config: CollectionConfig,
        logger: ContextLogger,
    ) -> list[Diagnostic]:
        task = asyncio.create_task(source.collect(config), name=f"collect:{source.name}")
        if config.timeout <= 0:
            return await task
        try:
            done, _ = await asyncio.wait({task}, timeout=config.timeout / 1000)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task in done:
            return task.result()
        # The timed-out collection keeps running; only its result is discarded.
        self._abandoned.add(task)
        task.add_done_callback(partial(self._finish_abandoned, logger=logger))
        raise SourceTimeoutError(source.name, config.timeout)

    def _finish_abandoned(self, task: asyncio.Task[list[Diagnostic]], *, logger: ContextLogger) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug("Abandoned diagnostic source failed", extra={"error": str(error)})
        else:
            logger.debug("Abandoned diagnostic source finished", extra={"diagnostics": len(task.result())})


__all__ = [
    "CollectionOrchestrator",
    "SourceOutcome",
    "build_source_statistics",
    "is_source_enabled",
]
