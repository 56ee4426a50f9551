# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Runtime wiring of lintharvest services."""

from __future__ import annotations

from .container import ServiceContainer, ServiceResolutionError, build_services, default_sources

__all__ = ["ServiceContainer", "ServiceResolutionError", "build_services", "default_sources"]
