#=============================================================================
# File        : slabtrend/sampling.py
# Project     : SlabTrend v1.0
# Component   : Sampling - Slab Statistics Snapshot and Ordering
# Description : Snapshot readers for kernel slab allocator statistics
#               • /proc/slabinfo parser (format 2.x)
#               • Provider protocol so tests and replays can inject data
#               • Stable ordering by name, active objects or object size
#               • Daemon self RSS measurement through psutil
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, psutil
# Standards   : PEP 8, Type Hints, Cross-platform Compatibility
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: os, logging, dataclasses, psutil, errors
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_sampling.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import time
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, runtime_checkable

import psutil

from .config import normalize_sort_key
from .errors import CollectionFailure

_logger = logging.getLogger(__name__)

SLABINFO_PATH = "/proc/slabinfo"
_SUPPORTED_VERSION_PREFIX = "2."


@dataclass(frozen=True)
class SlabSample:
    """One cache as reported by a single snapshot."""
    name: str
    object_size: int
    active_objects: int

    @property
    def active_memory(self) -> int:
        """Bytes held by active objects; the value the trend engine tracks."""
        return self.active_objects * self.object_size


@runtime_checkable
class SlabInfoProvider(Protocol):
    """Protocol for slab statistics sources."""

    def read(self) -> List[SlabSample]:
        """Return one sample per known cache or raise CollectionFailure."""
        ...


def parse_slabinfo(text: str, source: str = SLABINFO_PATH) -> List[SlabSample]:
    """
    Parse the contents of /proc/slabinfo.

    Layout (version 2.x)::

        slabinfo - version: 2.1
        # name <active_objs> <num_objs> <objsize> <objperslab> ...
        kmalloc-64  12345 12800 64 64 1 : tunables ...
    """
    lines = text.splitlines()
    if not lines:
        raise CollectionFailure(source, "empty snapshot")

    banner = lines[0].strip()
    if not banner.startswith("slabinfo - version:"):
        raise CollectionFailure(source, f"unexpected banner {banner!r}")
    version = banner.split(":", 1)[1].strip()
    if not version.startswith(_SUPPORTED_VERSION_PREFIX):
        raise CollectionFailure(source, f"unsupported slabinfo version {version}")

    samples: List[SlabSample] = []
    for lineno, line in enumerate(lines[1:], start=2):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split()
        if len(fields) < 4:
            raise CollectionFailure(source, f"line {lineno}: too few fields")
        try:
            active_objects = int(fields[1])
            object_size = int(fields[3])
        except ValueError:
            raise CollectionFailure(source, f"line {lineno}: non-numeric counters")
        if active_objects < 0 or object_size < 0:
            raise CollectionFailure(source, f"line {lineno}: negative counters")
        samples.append(SlabSample(name=fields[0], object_size=object_size,
                                  active_objects=active_objects))
    return samples


class ProcSlabInfoProvider:
    """Slab statistics read from the kernel's /proc/slabinfo (needs root)."""

    def __init__(self, path: str = SLABINFO_PATH) -> None:
        self.path = path

    def read(self) -> List[SlabSample]:
        try:
            with open(self.path, "r", encoding="ascii", errors="replace") as f:
                text = f.read()
        except OSError as e:
            raise CollectionFailure(self.path, e.strerror or str(e)) from e
        samples = parse_slabinfo(text, self.path)
        _logger.debug(f"Read {len(samples)} caches from {self.path}")
        return samples

    def __repr__(self) -> str:
        return f"ProcSlabInfoProvider(path='{self.path}')"


def sort_samples(samples: Iterable[SlabSample], key: Optional[str] = None) -> List[SlabSample]:
    """
    Order a snapshot for display and iteration.

    ``n`` sorts by name ascending, ``a`` by active objects descending and
    ``s`` by object size descending. Ties keep snapshot order. The order
    never changes any per-cache statistic.
    """
    k = normalize_sort_key(key)
    if k == "n":
        return sorted(samples, key=lambda s: s.name)
    if k == "s":
        return sorted(samples, key=lambda s: s.object_size, reverse=True)
    return sorted(samples, key=lambda s: s.active_objects, reverse=True)


class SelfMemoryTracker:
    """
    RSS of the daemon process itself.

    The total horizon keeps every sample, so the daemon's own footprint
    grows with uptime; this is what makes that growth visible in the logs.
    """

    def __init__(self, pid: Optional[int] = None) -> None:
        self._process = psutil.Process(pid or os.getpid())
        self._baseline_mb: Optional[float] = None
        self._last_measurement = 0.0
        self._measurement_cache = 0.0
        self._cache_duration = 0.1  # Cache for 100ms to reduce overhead

    def set_baseline(self) -> None:
        """Set current memory usage as baseline for growth calculations."""
        self._baseline_mb = self.get_rss_mb()

    def get_rss_mb(self) -> float:
        """Get current RSS memory usage in MB with caching."""
        now = time.time()
        if now - self._last_measurement < self._cache_duration:
            return self._measurement_cache

        try:
            self._measurement_cache = self._process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            _logger.debug(f"RSS measurement failed: {e}")
            self._measurement_cache = 0.0
        self._last_measurement = now
        return self._measurement_cache

    def get_growth_mb(self) -> Optional[float]:
        """Get memory growth since baseline in MB."""
        if self._baseline_mb is None:
            return None
        return max(0.0, self.get_rss_mb() - self._baseline_mb)
