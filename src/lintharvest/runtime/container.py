# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Minimal dependency injection container and the default service graph."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final, TypeVar, cast

from ..application.service import DiagnosticApplicationService
from ..collection.analytics import DiagnosticAnalytics
from ..collection.orchestrator import CollectionOrchestrator
from ..config import ReporterSettings
from ..core.logging import get_logger
from ..filesystem.layout import OutputLayout
from ..filesystem.local import FileSystem, LocalFileSystem
from ..reporting.enricher import SourceCodeEnricher
from ..reporting.writer import StructuredReportWriter
from ..sources.base import SourceAdapter
from ..sources.eslint import EslintSource
from ..sources.typescript import TypeScriptSource
from ..sources.vitest import VitestSource

type ServiceFactory = Callable[[ServiceContainer], object]

ServiceT = TypeVar("ServiceT")

SETTINGS: Final[str] = "settings"
FILE_SYSTEM: Final[str] = "file_system"
OUTPUT_LAYOUT: Final[str] = "output_layout"
SOURCES: Final[str] = "sources"
ANALYTICS: Final[str] = "analytics"
ORCHESTRATOR: Final[str] = "orchestrator"
ENRICHER: Final[str] = "enricher"
WRITER: Final[str] = "writer"
APPLICATION: Final[str] = "application"


class ServiceResolutionError(KeyError):
    """Raise when a requested service has not been registered."""


@dataclass(frozen=True)
class _ServiceRecord:
    """Store metadata about a registered service factory."""

    factory: ServiceFactory
    singleton: bool


class ServiceContainer:
    """Provide a lightweight registry for service factories."""

    def __init__(self) -> None:
        self._factories: dict[str, _ServiceRecord] = {}
        self._singletons: dict[str, object] = {}

    def register(
        self,
        key: str,
        factory: ServiceFactory,
        *,
        singleton: bool = True,
        replace: bool = False,
    ) -> None:
        """Register ``factory`` under ``key``.

        Args:
            key: Unique service identifier used during lookups.
            factory: Callable responsible for constructing the service instance.
            singleton: When ``True`` the service is cached after the first resolution.
            replace: When ``True`` replace an existing registration for ``key``.

        Raises:
            ValueError: If a service is already registered and ``replace`` is ``False``.
        """

        if not replace and key in self:
            raise ValueError(f"service '{key}' already registered")
        self._factories[key] = _ServiceRecord(factory=factory, singleton=singleton)
        if replace and key in self._singletons:
            self._singletons.pop(key, None)

    def resolve(self, key: str) -> object:
        """Resolve the service registered under ``key``.

        Raises:
            ServiceResolutionError: If no factory is registered for ``key``.
        """

        record = self._factories.get(key)
        if record is None:
            raise ServiceResolutionError(key)
        if record.singleton:
            if key not in self._singletons:
                self._singletons[key] = record.factory(self)
            return self._singletons[key]
        return record.factory(self)

    def resolve_as(self, key: str, expected: type[ServiceT]) -> ServiceT:
        """Resolve ``key`` and check the instance against ``expected``.

        Raises:
            ServiceResolutionError: If ``key`` is unknown.
            TypeError: If the resolved service is not an ``expected`` instance.
        """

        service = self.resolve(key)
        if not isinstance(service, expected):
            raise TypeError(f"service '{key}' is {type(service).__name__}, expected {expected.__name__}")
        return service

    def __contains__(self, key: str) -> bool:
        return key in self._factories


def default_sources(settings: ReporterSettings) -> list[SourceAdapter]:
    """Return the built-in adapters honouring configured command overrides."""

    return [
        EslintSource(command=settings.command_for("eslint", EslintSource.default_command)),
        TypeScriptSource(command=settings.command_for("typescript", TypeScriptSource.default_command)),
        VitestSource(command=settings.command_for("vitest", VitestSource.default_command)),
    ]


def _sources(container: ServiceContainer) -> object:
    return default_sources(container.resolve_as(SETTINGS, ReporterSettings))


def _file_system(container: ServiceContainer) -> object:
    return LocalFileSystem(container.resolve_as(SETTINGS, ReporterSettings).root_path)


def _output_layout(container: ServiceContainer) -> object:
    settings = container.resolve_as(SETTINGS, ReporterSettings)
    return OutputLayout(
        output_dir=settings.resolved_output_dir,
        file_system=cast(FileSystem, container.resolve(FILE_SYSTEM)),
    )


def _orchestrator(container: ServiceContainer) -> object:
    return CollectionOrchestrator(
        cast(Sequence[SourceAdapter], container.resolve(SOURCES)),
        container.resolve_as(ANALYTICS, DiagnosticAnalytics),
        logger=get_logger("lintharvest.collection"),
    )


def _enricher(container: ServiceContainer) -> object:
    settings = container.resolve_as(SETTINGS, ReporterSettings)
    return SourceCodeEnricher(cast(FileSystem, container.resolve(FILE_SYSTEM)), settings.root_path)


def _writer(container: ServiceContainer) -> object:
    settings = container.resolve_as(SETTINGS, ReporterSettings)
    return StructuredReportWriter(container.resolve_as(OUTPUT_LAYOUT, OutputLayout), settings.root_path)


def _application(container: ServiceContainer) -> object:
    settings = container.resolve_as(SETTINGS, ReporterSettings)
    return DiagnosticApplicationService(
        container.resolve_as(ORCHESTRATOR, CollectionOrchestrator),
        container.resolve_as(ENRICHER, SourceCodeEnricher),
        container.resolve_as(WRITER, StructuredReportWriter),
        container.resolve_as(OUTPUT_LAYOUT, OutputLayout),
        read_error_policy=settings.read_error_policy,
    )


def build_services(
    settings: ReporterSettings,
    *,
    sources: Sequence[SourceAdapter] | None = None,
    file_system: FileSystem | None = None,
) -> ServiceContainer:
    """Return a fresh container wired for one reporting process.

    Args:
        settings: Project settings shared by every service.
        sources: Adapters replacing the built-in ESLint, TypeScript and Vitest sources.
        file_system: File-system collaborator replacing the local disk.

    Returns:
        ServiceContainer: New container; nothing is shared between calls.
    """

    container = ServiceContainer()
    container.register(SETTINGS, lambda _: settings)
    if sources is None:
        container.register(SOURCES, _sources)
    else:
        adapters = list(sources)
        container.register(SOURCES, lambda _: adapters)
    if file_system is None:
        container.register(FILE_SYSTEM, _file_system)
    else:
        container.register(FILE_SYSTEM, lambda _: file_system)
    container.register(OUTPUT_LAYOUT, _output_layout)
    container.register(ANALYTICS, lambda _: DiagnosticAnalytics())
    container.register(ORCHESTRATOR, _orchestrator)
    container.register(ENRICHER, _enricher)
    container.register(WRITER, _writer)
    container.register(APPLICATION, _application)
    return container


__all__ = [
    "ANALYTICS",
    "APPLICATION",
    "ENRICHER",
    "FILE_SYSTEM",
    "ORCHESTRATOR",
    "OUTPUT_LAYOUT",
    "SETTINGS",
    "SOURCES",
    "WRITER",
    "ServiceContainer",
    "ServiceResolutionError",
    "build_services",
    "default_sources",
]
