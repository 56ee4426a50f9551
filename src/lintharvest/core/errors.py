# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across lintharvest."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from types import MappingProxyType

type ErrorContext = Mapping[str, object]


class LintHarvestError(Exception):
    """Base error carrying structured context and an optional cause."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialise the error with a message, context, and cause.

        Args:
            message: Human-readable error message shown to the user.
            context: Structured details describing the failure.
            cause: Original exception wrapped by this error.
        """

        super().__init__(message)
        self.message = message
        self.context: Mapping[str, object] = MappingProxyType(dict(context or {}))
        self.cause = cause
        self.timestamp = datetime.now(UTC)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the error.

        Returns:
            dict[str, object]: Error name, message, context, and cause summary.
        """

        payload: dict[str, object] = {
            "name": type(self).__name__,
            "message": self.message,
            "context": dict(self.context),
            "timestamp": self.timestamp.isoformat(),
        }
        if self.cause is not None:
            payload["cause"] = {"name": type(self.cause).__name__, "message": str(self.cause)}
        return payload


class ConfigurationError(LintHarvestError):
    """Raised when configuration input is invalid or cannot be loaded."""


class ValidationError(ConfigurationError):
    """Raised when a configuration payload fails schema validation."""

    def __init__(
        self,
        message: str,
        *,
        issues: Sequence[Mapping[str, object]] = (),
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialise the error with the structured issue list.

        Args:
            message: Human-readable summary of the validation failure.
            issues: Structured issues (``loc``, ``msg``, ``type``) reported by the schema.
            context: Additional structured details.
            cause: Original validation exception.
        """

        super().__init__(message, context=context, cause=cause)
        self.issues: tuple[Mapping[str, object], ...] = tuple(issues)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["issues"] = [dict(issue) for issue in self.issues]
        return payload


class FileSystemError(LintHarvestError):
    """Raised when a file-system operation fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", path)
        super().__init__(message, context=merged, cause=cause)
        self.path = path


class DiagnosticError(LintHarvestError):
    """Raised when diagnostic collection, aggregation, or reporting fails."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        merged = dict(context or {})
        if source is not None:
            merged.setdefault("source", source)
        super().__init__(message, context=merged, cause=cause)
        self.source = source


class SourceTimeoutError(DiagnosticError):
    """Raised when a diagnostic source exceeds its collection timeout."""

    def __init__(self, source: str, timeout_ms: int) -> None:
        super().__init__(
            f"Integration {source} timed out after {timeout_ms}ms",
            source=source,
            context={"timeout": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class CollectionError(DiagnosticError):
    """Base class for failures of a whole collection run."""


class NoSourcesEnabledError(CollectionError):
    """Raised when configuration leaves no diagnostic source active."""


class AllSourcesFailedError(CollectionError):
    """Raised when every active diagnostic source failed or timed out."""


__all__ = [
    "AllSourcesFailedError",
    "CollectionError",
    "ConfigurationError",
    "DiagnosticError",
    "ErrorContext",
    "FileSystemError",
    "LintHarvestError",
    "NoSourcesEnabledError",
    "SourceTimeoutError",
    "ValidationError",
]
