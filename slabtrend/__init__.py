#=============================================================================
# File        : slabtrend/__init__.py
# Project     : SlabTrend v1.0
# Component   : Package Initialization
# Description : Leak-trend detection for kernel slab allocator caches
#               • Full, one hour and fifteen minute retention horizons
#               • Tie-corrected Mann-Kendall test every cycle
#               • Append-only semicolon delimited trend log
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, psutil
# Standards   : PEP 8, Type Hints, Dataclasses
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: typing, logging, psutil
# SHA-256     : [Updated by CI/CD]
# Testing     : tests/
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. Released under MIT License.
#=============================================================================

"""
SlabTrend - Kernel Slab Cache Leak Detection

Samples the active memory of every slab cache once per cycle and tests
each cache for a monotonic increase over the whole run, the last hour and
the last fifteen minutes.

Quick Start:
    from slabtrend import SlabTrendConfig, SlabMonitor, TrendLogWriter

    config = SlabTrendConfig(delay_s=30)
    with TrendLogWriter(config.log_path) as writer:
        SlabMonitor(config, writer=writer).run()
"""

import logging

__version__ = "1.0.0"
__author__ = "Kyle Clouthier"
__license__ = "MIT"

# Configure safe logging defaults
_logger = logging.getLogger(__name__)
_logger.setLevel(logging.WARNING)  # Only WARN/ERROR by default

# Add console handler only if none exists
if not _logger.handlers and not logging.getLogger().handlers:
    _console_handler = logging.StreamHandler()
    _console_handler.setLevel(logging.WARNING)
    _formatter = logging.Formatter('[SlabTrend] %(levelname)s: %(message)s')
    _console_handler.setFormatter(_formatter)
    _logger.addHandler(_console_handler)

from .config import SlabTrendConfig
from .errors import (
    SlabTrendError,
    CollectionFailure,
    InvalidConfiguration,
    LogWriteError,
    ResourceExhaustion
)
from .sampling import (
    SlabSample,
    SlabInfoProvider,
    ProcSlabInfoProvider,
    parse_slabinfo,
    sort_samples
)
from .series import Horizon, Sample, SlabSeries, TieHistogram
from .mann_kendall import HorizonStatistic, TrendDirection, analyze_series
from .registry import SlabRegistry
from .report import TrendRecord, TrendLogWriter, LOG_HEADER
from .monitor import SlabMonitor, run_cycle

__all__ = [
    # Configuration
    "SlabTrendConfig",

    # Errors
    "SlabTrendError",
    "CollectionFailure",
    "InvalidConfiguration",
    "LogWriteError",
    "ResourceExhaustion",

    # Sampling
    "SlabSample",
    "SlabInfoProvider",
    "ProcSlabInfoProvider",
    "parse_slabinfo",
    "sort_samples",

    # Series and statistics
    "Horizon",
    "Sample",
    "SlabSeries",
    "TieHistogram",
    "HorizonStatistic",
    "TrendDirection",
    "analyze_series",

    # Orchestration
    "SlabRegistry",
    "SlabMonitor",
    "run_cycle",

    # Reporting
    "TrendRecord",
    "TrendLogWriter",
    "LOG_HEADER",

    # Metadata
    "__version__",
    "__author__",
    "__license__",
]
