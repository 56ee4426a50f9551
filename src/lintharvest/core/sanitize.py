# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Redaction of secrets and user-specific paths in diagnostic text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

REDACTED: Final[str] = "[REDACTED]"

_KEYED_SECRET = re.compile(
    r"(?P<key>password|secret|authorization)\s*[:=]\s*['\"]?(?:Bearer\s+)?[^\s'\"]+['\"]?",
    re.IGNORECASE,
)
# Tokens need a long value so parser wording such as ``Unexpected token: }`` survives.
_KEYED_TOKEN = re.compile(
    r"(?P<key>api[_-]?key|token)\s*[:=]\s*['\"]?[A-Za-z0-9_.\-]{16,}['\"]?",
    re.IGNORECASE,
)
_BEARER = re.compile(r"Bearer\s+\S+", re.IGNORECASE)
_ENV_REFERENCE = re.compile(r"\$\{[A-Z_][A-Z0-9_]*\}|%[A-Z_][A-Z0-9_]*%")
_USER_DIRS: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"/(?:home|Users)/[^/\s'\"]+"), "/~"),
    (re.compile(r"(?P<drive>[A-Za-z]):\\Users\\[^\\\s'\"]+"), r"\g<drive>:\\~"),
)


def _prefix_pattern(prefix: Path | None) -> re.Pattern[str] | None:
    if prefix is None:
        return None
    text = str(prefix).rstrip("/\\")
    if not text or text == prefix.anchor.rstrip("/\\"):
        return None
    # Only whole path segments match, so ``/work/app`` leaves ``/work/apple`` alone.
    return re.compile(re.escape(text) + r"(?![^/\\\s'\"):,])")


@dataclass(frozen=True, slots=True)
class Sanitizer:
    """Rewrite diagnostic text before it is persisted.

    ``messages`` redacts credentials such as ``password=...`` or bearer
    tokens. ``paths`` replaces the project root with ``.``, the home
    directory with ``~`` and any other user directory with ``/~``.
    """

    root: Path | None = None
    home: Path | None = None
    messages: bool = True
    paths: bool = True
    _root_pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)
    _home_pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_root_pattern", _prefix_pattern(self.root))
        object.__setattr__(self, "_home_pattern", _prefix_pattern(self.home))

    @classmethod
    def for_project(cls, root: Path, *, messages: bool = True, paths: bool = True) -> Sanitizer:
        """Return a sanitizer anchored at ``root`` and the current user's home."""

        try:
            home: Path | None = Path.home()
        except RuntimeError:
            home = None
        return cls(root=root.resolve(), home=home, messages=messages, paths=paths)

    def sanitize(self, text: str) -> str:
        """Return ``text`` with secrets and user paths masked."""

        if self.messages:
            for pattern in (_KEYED_SECRET, _KEYED_TOKEN):
                text = pattern.sub(lambda match: f"{match.group('key')}={REDACTED}", text)
            text = _BEARER.sub(f"Bearer {REDACTED}", text)
            text = _ENV_REFERENCE.sub(REDACTED, text)
        if self.paths:
            if self._root_pattern is not None:
                text = self._root_pattern.sub(".", text)
            if self._home_pattern is not None:
                text = self._home_pattern.sub("~", text)
            for pattern, replacement in _USER_DIRS:
                text = pattern.sub(replacement, text)
        return text

    def sanitize_optional(self, text: str | None) -> str | None:
        return None if text is None else self.sanitize(text)


__all__ = ["REDACTED", "Sanitizer"]
