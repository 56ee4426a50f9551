# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from rich.console import Console
from rich.text import Text

from ..core.errors import LintHarvestError
from ..core.logging import fail as core_fail
from ..core.logging import info as core_info
from ..core.logging import ok as core_ok
from ..core.logging import warn as core_warn

EXIT_SUCCESS: Final[int] = 0
EXIT_DIAGNOSTICS: Final[int] = 1
EXIT_FATAL: Final[int] = 2


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_FATAL) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Route CLI feedback through the console helpers and a Rich console."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self.console.print(Text.assemble(("[debug] ", "bold cyan"), (message, "dim")))

    def report_error(self, exc: LintHarvestError) -> None:
        """Print ``exc`` for the user; context and traceback only in debug mode.

        Args:
            exc: Library error that aborted the command.
        """

        self.fail(exc.message)
        if not self.debug_enabled:
            return
        for key, value in exc.context.items():
            self.debug(f"{key}={value}")
        self.console.print_exception()


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Configured logger.
    """

    console = Console(no_color=no_color, highlight=False)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


__all__ = [
    "EXIT_DIAGNOSTICS",
    "EXIT_FATAL",
    "EXIT_SUCCESS",
    "CLIError",
    "CLILogger",
    "build_cli_logger",
]
