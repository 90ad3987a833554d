#=============================================================================
# File        : slabtrend/registry.py
# Project     : SlabTrend v1.0
# Component   : Registry - Per-Cache Series Ownership
# Description : Mapping from cache name to its series, created on first
#               sighting and kept for the life of the process.
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: logging, typing, config, series
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_monitor.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from .config import MID_TERM_S, SHORT_TERM_S, SlabTrendConfig
from .series import SlabSeries

_logger = logging.getLogger(__name__)


class SlabRegistry:
    """
    Owned map of cache name to SlabSeries.

    Caches that stop showing up in snapshots keep their history; nothing
    is ever evicted.
    """

    def __init__(self, mid_term_s: int = MID_TERM_S, short_term_s: int = SHORT_TERM_S,
                 max_total_samples: Optional[int] = None) -> None:
        self.mid_term_s = mid_term_s
        self.short_term_s = short_term_s
        self.max_total_samples = max_total_samples
        self._series: Dict[str, SlabSeries] = {}

    @classmethod
    def from_config(cls, config: SlabTrendConfig) -> "SlabRegistry":
        return cls(mid_term_s=config.mid_term_s,
                   short_term_s=config.short_term_s,
                   max_total_samples=config.max_total_samples)

    def series_for(self, name: str) -> SlabSeries:
        """Look up a cache's series, creating it on first sighting."""
        series = self._series.get(name)
        if series is None:
            series = SlabSeries(name, mid_term_s=self.mid_term_s,
                                short_term_s=self.short_term_s,
                                max_total_samples=self.max_total_samples)
            self._series[name] = series
            _logger.debug(f"Tracking new cache {name}")
        return series

    def observe(self, name: str, timestamp: float, value: float) -> SlabSeries:
        series = self.series_for(name)
        series.observe(timestamp, value)
        return series

    def get(self, name: str) -> Optional[SlabSeries]:
        return self._series.get(name)

    def names(self) -> List[str]:
        return list(self._series)

    def total_samples(self) -> int:
        return sum(len(s) for s in self._series.values())

    def __contains__(self, name: object) -> bool:
        return name in self._series

    def __iter__(self) -> Iterator[SlabSeries]:
        return iter(self._series.values())

    def __len__(self) -> int:
        return len(self._series)

    def __repr__(self) -> str:
        return f"SlabRegistry(caches={len(self._series)}, samples={self.total_samples()})"
