# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source adapter interface and the shared subprocess-backed implementation."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from subprocess import CompletedProcess
from typing import ClassVar, Protocol, runtime_checkable

from ..config import CollectionConfig
from ..core.errors import DiagnosticError, SourceTimeoutError
from ..core.logging import get_logger
from ..core.models import Diagnostic, DiagnosticSource
from .process import CommandOptions, TimedOutProcess, run_command

type CommandRunner = Callable[..., CompletedProcess[str]]


@runtime_checkable
class SourceAdapter(Protocol):
    """Contract implemented by every diagnostic source."""

    @property
    def name(self) -> str:
        """Return the adapter name used for filtering and reporting."""
        ...

    async def collect(self, config: CollectionConfig) -> list[Diagnostic]:
        """Return the diagnostics produced for ``config``.

        Raises:
            DiagnosticError: If the underlying tool cannot run or its output
                cannot be interpreted.
        """
        ...


class CommandSource(ABC):
    """Run an external tool in a worker thread and parse its output.

    Subclasses provide the command line and a parser; the base class handles
    executable resolution, exit-code validation, and error wrapping.
    """

    source: ClassVar[DiagnosticSource]
    default_command: ClassVar[tuple[str, ...]]
    accepted_returncodes: ClassVar[frozenset[int]] = frozenset({0, 1})

    def __init__(
        self,
        *,
        command: Sequence[str] | None = None,
        runner: CommandRunner = run_command,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._command = tuple(command) if command else self.default_command
        self._runner = runner
        self._env = env
        self._logger = get_logger(__name__, source=self.source.value)

    @property
    def name(self) -> str:
        return self.source.value

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    @abstractmethod
    def build_args(self, config: CollectionConfig) -> list[str]:
        """Return the arguments appended to :attr:`command` for ``config``."""

    @abstractmethod
    def parse(self, completed: CompletedProcess[str], config: CollectionConfig) -> list[Diagnostic]:
        """Convert the completed process output into diagnostics."""

    async def collect(self, config: CollectionConfig) -> list[Diagnostic]:
        return await asyncio.to_thread(self.collect_sync, config)

    def collect_sync(self, config: CollectionConfig) -> list[Diagnostic]:
        """Run the tool synchronously and return its diagnostics.

        Args:
            config: Collection configuration for the current run.

        Returns:
            list[Diagnostic]: Parsed diagnostics in tool output order.

        Raises:
            SourceTimeoutError: If the tool was killed by the collection timeout.
            DiagnosticError: If the tool cannot run, exits abnormally, or
                produces unparseable output.
        """

        args = [*self._command, *self.build_args(config)]
        options = CommandOptions(
            cwd=config.root_path,
            env=self._env,
            timeout=config.timeout / 1000 if config.timeout > 0 else None,
        )
        self._logger.debug("running tool", extra={"command": " ".join(args)})
        try:
            completed = self._runner(args, options=options)
        except (FileNotFoundError, OSError) as exc:
            raise DiagnosticError(
                f"Unable to run {self.name}: {exc}",
                source=self.name,
                context={"command": args},
                cause=exc,
            ) from exc
        if isinstance(completed, TimedOutProcess):
            raise SourceTimeoutError(self.name, config.timeout)
        if completed.returncode not in self.accepted_returncodes:
            stderr = (completed.stderr or "").strip()
            raise DiagnosticError(
                f"{self.name} exited with status {completed.returncode}: {stderr or '<no stderr>'}",
                source=self.name,
                context={"command": args, "returncode": completed.returncode},
            )
        diagnostics = self.parse(completed, config)
        self._logger.debug("parsed tool output", extra={"diagnostics": len(diagnostics)})
        return diagnostics


__all__ = ["CommandRunner", "CommandSource", "SourceAdapter"]
