# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising different tool vocabularies."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    NOTE = "note"

    @property
    def rank(self) -> int:
        """Return the ordinal used when comparing severities.

        Returns:
            int: Higher values denote more severe diagnostics.
        """

        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: Final[Mapping[Severity, int]] = {
    Severity.ERROR: 3,
    Severity.WARNING: 2,
    Severity.INFO: 1,
    Severity.NOTE: 0,
}

SEVERITY_ORDER: Final[tuple[Severity, ...]] = (
    Severity.ERROR,
    Severity.WARNING,
    Severity.INFO,
    Severity.NOTE,
)

_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "fatal": Severity.ERROR,
    "err": Severity.ERROR,
    "warn": Severity.WARNING,
    "information": Severity.INFO,
    "notice": Severity.INFO,
    "suggestion": Severity.INFO,
    "hint": Severity.NOTE,
    "message": Severity.NOTE,
}


def coerce_severity(value: Severity | str | None, default: Severity = Severity.WARNING) -> Severity:
    """Return a :class:`Severity` for ``value`` tolerating tool-specific labels.

    Args:
        value: Severity enum, label, or ``None`` emitted by a tool.
        default: Severity returned when ``value`` is unknown.

    Returns:
        Severity: Normalised severity.
    """

    if isinstance(value, Severity):
        return value
    if not value:
        return default
    label = value.strip().lower()
    try:
        return Severity(label)
    except ValueError:
        return _SEVERITY_ALIASES.get(label, default)


__all__ = [
    "SEVERITY_ORDER",
    "Severity",
    "coerce_severity",
]
