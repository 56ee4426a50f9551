# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Library logging with key/value context built on :mod:`logging`."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Final

from rich.logging import RichHandler

from .console import detect_tty, get_console_manager

ROOT_LOGGER_NAME: Final[str] = "lintharvest"
_HANDLER_MARKER: Final[str] = "_lintharvest_handler"


def _format_context(context: Mapping[str, object]) -> str:
    parts: list[str] = []
    for key, value in context.items():
        rendered = str(value)
        if not rendered or any(char.isspace() for char in rendered):
            rendered = f'"{rendered}"'
        parts.append(f"{key}={rendered}")
    return " ".join(parts)


class ContextLogger(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter appending bound ``key=value`` context to each message.

    Context bound through :meth:`child` is merged with the parent's context,
    and per-call ``extra`` values override bound keys of the same name.
    """

    def __init__(self, logger: logging.Logger, context: Mapping[str, object] | None = None) -> None:
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> dict[str, object]:
        """Return a copy of the context bound to this logger."""

        return dict(self.extra or {})

    def child(self, **context: object) -> ContextLogger:
        """Return a logger inheriting this context extended with ``context``.

        Args:
            **context: Additional key/value pairs bound to the child.

        Returns:
            ContextLogger: Adapter writing to the same underlying logger.
        """

        merged = self.context
        merged.update(context)
        return ContextLogger(self.logger, merged)

    def process(self, msg: object, kwargs: MutableMapping[str, Any]) -> tuple[object, MutableMapping[str, Any]]:
        merged = self.context
        call_extra = kwargs.get("extra")
        if isinstance(call_extra, Mapping):
            merged.update(call_extra)
        kwargs["extra"] = {"context": merged}
        if not merged:
            return msg, kwargs
        return f"{msg} {_format_context(merged)}", kwargs


def get_logger(name: str, **context: object) -> ContextLogger:
    """Return a :class:`ContextLogger` for ``name`` bound to ``context``.

    Args:
        name: Logger name, usually ``__name__`` of the calling module.
        **context: Key/value pairs attached to every message.

    Returns:
        ContextLogger: Adapter around :func:`logging.getLogger`.
    """

    return ContextLogger(logging.getLogger(name), context)


def configure_logging(*, verbose: bool = False, use_color: bool | None = None) -> logging.Logger:
    """Install a Rich handler on the package logger.

    Calling this repeatedly replaces the previously installed handler rather
    than stacking duplicates.

    Args:
        verbose: Emit ``DEBUG`` records when ``True``; ``INFO`` otherwise.
        use_color: Optional explicit colour flag overriding TTY detection.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
    color = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color, emoji=False)
    handler = RichHandler(
        console=console,
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    setattr(handler, _HANDLER_MARKER, True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


__all__ = [
    "ROOT_LOGGER_NAME",
    "ContextLogger",
    "configure_logging",
    "get_logger",
]
