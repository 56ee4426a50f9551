# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Application services coordinating a reporting run."""

from __future__ import annotations

from .service import DiagnosticApplicationService

__all__ = ["DiagnosticApplicationService"]
