# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Diagnostic source adapters for external tools."""

from __future__ import annotations

from .base import CommandRunner, CommandSource, SourceAdapter
from .eslint import EslintSource, parse_eslint
from .typescript import TypeScriptSource, parse_tsc
from .vitest import TEST_FAILURE_CODE, VitestSource, parse_vitest

__all__ = [
    "TEST_FAILURE_CODE",
    "CommandRunner",
    "CommandSource",
    "EslintSource",
    "SourceAdapter",
    "TypeScriptSource",
    "VitestSource",
    "parse_eslint",
    "parse_tsc",
    "parse_vitest",
]
