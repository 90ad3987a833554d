#=============================================================================
# File        : slabtrend/monitor.py
# Project     : SlabTrend v1.0
# Component   : Monitor - Cycle Driver
# Description : Collect, retain, test and log, once per cycle
#               • run_cycle() updates the registry and builds trend records
#               • SlabMonitor owns provider, registry and log writer
#               • Fixed-delay loop with a stop event
#               • Fatal collection and memory errors stop the loop
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Threading
# Standards   : PEP 8, Type Hints, Production Safety
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: config, sampling, registry, mann_kendall, report, errors
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_monitor.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import time
import threading
import logging
from typing import Any, Dict, Iterable, List, Optional

from .config import SlabTrendConfig
from .errors import ResourceExhaustion, SlabTrendError
from .mann_kendall import DEFAULT_CRITICAL_VALUE, analyze_series
from .registry import SlabRegistry
from .report import TrendLogWriter, TrendRecord
from .sampling import (
    ProcSlabInfoProvider, SelfMemoryTracker, SlabInfoProvider, SlabSample, sort_samples
)

_logger = logging.getLogger(__name__)


def run_cycle(registry: SlabRegistry, samples: Iterable[SlabSample], timestamp: float,
              critical_value: float = DEFAULT_CRITICAL_VALUE) -> List[TrendRecord]:
    """
    Feed one snapshot into the registry and test every reported cache.

    Caches missing from the snapshot are left untouched.
    """
    records: List[TrendRecord] = []
    for sample in samples:
        series = registry.observe(sample.name, timestamp, sample.active_memory)
        stats = analyze_series(series, timestamp, critical_value)
        records.append(TrendRecord(timestamp=timestamp, sample=sample, statistics=stats))
    return records


class SlabMonitor:
    """
    Periodic slab trend monitor.

    Cycle timestamps are ``cycle_index * delay_s`` rather than wall clock
    time, so horizon membership depends only on how many cycles ran.
    """

    def __init__(self, config: SlabTrendConfig,
                 provider: Optional[SlabInfoProvider] = None,
                 writer: Optional[TrendLogWriter] = None,
                 registry: Optional[SlabRegistry] = None,
                 memory_tracker: Optional[SelfMemoryTracker] = None) -> None:
        self.config = config
        self.provider = provider if provider is not None else ProcSlabInfoProvider(config.slabinfo_path)
        self.writer = writer
        self.registry = registry if registry is not None else SlabRegistry.from_config(config)
        self.memory_tracker = memory_tracker
        self.cycle_index = 0
        self._stop_event = threading.Event()
        self._stats = {
            'cycles': 0,
            'records': 0,
            'last_cycle_ms': 0.0,
            'avg_cycle_ms': 0.0,
            'increasing_caches': 0,
        }

    @property
    def next_timestamp(self) -> float:
        return self.cycle_index * self.config.delay_s

    def run_once(self) -> List[TrendRecord]:
        """Run a single cycle and return its records."""
        timestamp = self.next_timestamp
        start = time.perf_counter()

        samples = sort_samples(self.provider.read(), self.config.sort_key)
        try:
            records = run_cycle(self.registry, samples, timestamp, self.config.critical_value)
        except MemoryError as e:
            raise ResourceExhaustion(
                f"Out of memory in cycle {self.cycle_index} "
                f"({self.registry.total_samples()} samples retained)") from e

        if self.writer is not None:
            self.writer.write_cycle(records)

        self.cycle_index += 1
        elapsed_ms = (time.perf_counter() - start) * 1000
        self._update_stats(records, elapsed_ms)

        rising = [r.name for r in records if r.increasing_horizons()]
        if rising:
            _logger.info(f"Increasing trend at t={timestamp:.0f}s: {', '.join(rising[:10])}"
                         + (f" (+{len(rising) - 10} more)" if len(rising) > 10 else ""))
        rss = f", rss {self.memory_tracker.get_rss_mb():.1f}MB" if self.memory_tracker else ""
        _logger.debug(f"Cycle {self.cycle_index} at t={timestamp:.0f}s: {len(records)} caches, "
                      f"{self.registry.total_samples()} samples, {elapsed_ms:.1f}ms{rss}")
        return records

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Loop until stopped, until ``max_cycles`` cycles ran, or until a
        fatal error. Returns the number of cycles completed.
        """
        self._stop_event.clear()
        if self.memory_tracker is not None:
            self.memory_tracker.set_baseline()
        _logger.debug(f"Monitor started: {self.config!r}")

        completed = 0
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except SlabTrendError as e:
                _logger.error(f"Stopping monitor: {e}")
                raise
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            if self._stop_event.wait(self.config.delay_s):
                break

        _logger.debug(f"Monitor stopped after {completed} cycles")
        return completed

    def stop(self) -> None:
        self._stop_event.set()

    def _update_stats(self, records: List[TrendRecord], elapsed_ms: float) -> None:
        s = self._stats
        s['cycles'] += 1
        s['records'] += len(records)
        s['last_cycle_ms'] = elapsed_ms
        s['avg_cycle_ms'] += (elapsed_ms - s['avg_cycle_ms']) / s['cycles']
        s['increasing_caches'] = sum(1 for r in records if r.increasing_horizons())

    def get_status(self) -> Dict[str, Any]:
        status: Dict[str, Any] = dict(self._stats)
        status['caches_tracked'] = len(self.registry)
        status['samples_retained'] = self.registry.total_samples()
        status['next_timestamp'] = self.next_timestamp
        if self.memory_tracker is not None:
            status['rss_mb'] = self.memory_tracker.get_rss_mb()
            status['rss_growth_mb'] = self.memory_tracker.get_growth_mb()
        return status
