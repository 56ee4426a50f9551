# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem collaborator, path helpers, and report directory layout."""

from __future__ import annotations

from .layout import ERRORS_DIRNAME, OutputLayout
from .local import FileSystem, LocalFileSystem
from .paths import absolute_report_path, is_rooted, relative_posix, report_file_name

__all__ = [
    "ERRORS_DIRNAME",
    "FileSystem",
    "LocalFileSystem",
    "OutputLayout",
    "absolute_report_path",
    "is_rooted",
    "relative_posix",
    "report_file_name",
]
