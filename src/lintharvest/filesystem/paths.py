# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for reasoning about filesystem paths."""

from __future__ import annotations

import os
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Final

_Pathish = str | PathLike[str] | Path
_DEFAULT_CACHE_SIZE: Final[int] = 1024
_SKIPPED_SEGMENTS: Final[frozenset[str]] = frozenset({"", ".", ".."})
ROOT_REPORT_NAME: Final[str] = "project-root"
REPORT_SUFFIX: Final[str] = ".json"


@lru_cache(maxsize=_DEFAULT_CACHE_SIZE)
def _best_effort_resolve(path: Path) -> Path:
    """Return ``path`` resolved where possible without raising.

    Args:
        path: Candidate path to resolve.

    Returns:
        Path: Absolute variant when resolution succeeds; otherwise the closest
        achievable approximation.
    """

    try:
        return path.resolve(strict=False)
    except (OSError, RuntimeError):
        return path.absolute() if not path.is_absolute() else path


def is_rooted(path: str) -> bool:
    """Return whether ``path`` is absolute in POSIX or native form."""

    return path.startswith("/") or Path(path).is_absolute()


def absolute_report_path(file_path: str, root: _Pathish) -> str:
    """Return ``file_path`` unchanged when rooted, else joined onto ``root``.

    Args:
        file_path: Path exactly as reported by the tool.
        root: Project root used for relative paths.

    Returns:
        str: Absolute path string used to read the file.
    """

    if is_rooted(file_path):
        return file_path
    return str(Path(root) / file_path)


def relative_posix(path: _Pathish, *, base_dir: _Pathish) -> str:
    """Return ``path`` relative to ``base_dir`` as a POSIX string.

    Paths outside ``base_dir`` keep their ``..`` prefixes; paths on another
    drive fall back to the resolved absolute form.

    Args:
        path: Path to relativise; relative inputs are taken from ``base_dir``.
        base_dir: Base directory used for relativisation.

    Returns:
        str: Relative POSIX path, or ``"."`` when both paths coincide.
    """

    base = _best_effort_resolve(Path(base_dir).expanduser())
    raw_path = Path(path).expanduser()
    candidate = _best_effort_resolve(raw_path if raw_path.is_absolute() else base / raw_path)
    try:
        return candidate.relative_to(base).as_posix()
    except ValueError:
        try:
            return Path(os.path.relpath(candidate, base)).as_posix()
        except ValueError:
            return candidate.as_posix()


def report_file_name(file_path: str, *, base_dir: _Pathish) -> str:
    """Return the JSON file name used to persist the report for ``file_path``.

    Path separators and ``:`` become ``_``; empty, ``.`` and ``..`` segments
    are dropped. A path that reduces to nothing maps to ``project-root.json``.

    Args:
        file_path: Reported path (absolute or relative).
        base_dir: Project root the name is computed against.

    Returns:
        str: Flat, filesystem-safe file name ending in ``.json``.
    """

    relative = relative_posix(file_path, base_dir=base_dir)
    segments = [
        part
        for segment in relative.split("/")
        for part in segment.split(":")
        if part not in _SKIPPED_SEGMENTS
    ]
    name = "_".join(segments) or ROOT_REPORT_NAME
    return f"{name}{REPORT_SUFFIX}"


__all__ = (
    "ROOT_REPORT_NAME",
    "absolute_report_path",
    "is_rooted",
    "relative_posix",
    "report_file_name",
)
