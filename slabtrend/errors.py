#=============================================================================
# File        : slabtrend/errors.py
# Project     : SlabTrend v1.0
# Component   : Errors - Exception Taxonomy
# Description : Exceptions raised by the collector, the trend log and the
#               configuration layer. All of them are fatal to the cycle loop.
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: None
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_monitor.py, tests/test_config.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from typing import Optional


class SlabTrendError(Exception):
    """Base exception for all SlabTrend errors."""

    pass


class CollectionFailure(SlabTrendError):
    """Raised when the slab statistics snapshot could not be read."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"Failed to collect slab info from {source}: {message}")


class InvalidConfiguration(SlabTrendError, ValueError):
    """Raised for configuration values the daemon refuses to start with."""

    pass


class LogWriteError(SlabTrendError):
    """Raised when the trend log cannot be opened or appended to."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Cannot write trend log {path}: {message}")


class ResourceExhaustion(SlabTrendError):
    """Raised when a cycle runs out of memory while updating the registry."""

    def __init__(self, message: str, entity: Optional[str] = None) -> None:
        self.entity = entity
        super().__init__(message)
