# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Console helpers and structured library logging."""

from __future__ import annotations

from .console import detect_tty, emoji, fail, get_console_manager, info, ok, warn
from .structured import ROOT_LOGGER_NAME, ContextLogger, configure_logging, get_logger

__all__ = [
    "ROOT_LOGGER_NAME",
    "ContextLogger",
    "configure_logging",
    "detect_tty",
    "emoji",
    "fail",
    "get_console_manager",
    "get_logger",
    "info",
    "ok",
    "warn",
]
