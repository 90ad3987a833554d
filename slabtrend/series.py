#=============================================================================
# File        : slabtrend/series.py
# Project     : SlabTrend v1.0
# Component   : Series - Windowed Time Series and Tie Histograms
# Description : Per-cache sample history with sliding retention windows
#               • Full history (total horizon), oldest to newest
#               • Boundary tracking for the mid-term and short-term windows
#               • Incrementally maintained tie histograms per horizon
#               • Optional cap on the total horizon
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, Enum
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: dataclasses, enum, typing, config
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_series.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .config import MID_TERM_S, SHORT_TERM_S


class Horizon(Enum):
    """Retention windows tracked for every cache."""
    TOTAL = "total"
    MID_TERM = "mid"
    SHORT_TERM = "short"


HORIZONS: Tuple[Horizon, ...] = (Horizon.TOTAL, Horizon.MID_TERM, Horizon.SHORT_TERM)
BOUNDED_HORIZONS: Tuple[Horizon, ...] = (Horizon.MID_TERM, Horizon.SHORT_TERM)


@dataclass(frozen=True)
class Sample:
    """Active memory of one cache at one cycle timestamp."""
    timestamp: float
    value: float


class TieHistogram:
    """
    Count of retained samples per exact value within one horizon.

    Buckets whose count drops to zero are kept; they contribute nothing
    to the tie correction.
    """

    __slots__ = ('_buckets',)

    def __init__(self) -> None:
        self._buckets: Dict[float, int] = {}

    def add(self, value: float) -> None:
        self._buckets[value] = self._buckets.get(value, 0) + 1

    def retire(self, value: float) -> None:
        self._buckets[value] -= 1

    def tied(self, value: float) -> int:
        return self._buckets.get(value, 0)

    def total(self) -> int:
        """Number of samples currently counted."""
        return sum(self._buckets.values())

    def correction(self) -> int:
        """Tie term of the Mann-Kendall variance: sum of t(t-1)(2t+5) over groups with t > 1."""
        return sum(t * (t - 1) * (2 * t + 5) for t in self._buckets.values() if t > 1)

    def items(self) -> Iterator[Tuple[float, int]]:
        return iter(self._buckets.items())

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, value: object) -> bool:
        return value in self._buckets

    def __repr__(self) -> str:
        return f"TieHistogram(buckets={len(self._buckets)}, total={self.total()})"


class SlabSeries:
    """
    Sample history of one cache.

    Samples are kept oldest first. For each bounded horizon a boundary
    index points at the oldest sample still inside that window; everything
    before it has already been retired from the horizon's histogram but
    stays in the total history.
    """

    def __init__(self, name: str,
                 mid_term_s: int = MID_TERM_S,
                 short_term_s: int = SHORT_TERM_S,
                 max_total_samples: Optional[int] = None) -> None:
        self.name = name
        self.max_total_samples = max_total_samples
        self._windows: Dict[Horizon, Optional[int]] = {
            Horizon.TOTAL: None,
            Horizon.MID_TERM: mid_term_s,
            Horizon.SHORT_TERM: short_term_s,
        }
        self._samples: List[Sample] = []
        self._boundary: Dict[Horizon, int] = {h: 0 for h in BOUNDED_HORIZONS}
        self.histograms: Dict[Horizon, TieHistogram] = {h: TieHistogram() for h in HORIZONS}

    # --------- Retention ---------

    def observe(self, timestamp: float, value: float) -> Sample:
        """Add the newest sample, retiring whatever aged out of the bounded windows."""
        if self._samples and timestamp < self._samples[-1].timestamp:
            raise ValueError(
                f"{self.name}: sample at {timestamp} is older than newest {self._samples[-1].timestamp}")

        sample = Sample(timestamp=timestamp, value=value)
        if self._samples:
            for horizon in BOUNDED_HORIZONS:
                self._retire_expired(horizon, timestamp)

        for histogram in self.histograms.values():
            histogram.add(value)
        self._samples.append(sample)

        if self.max_total_samples is not None:
            while len(self._samples) > self.max_total_samples:
                self._evict_oldest()
        return sample

    def _retire_expired(self, horizon: Horizon, now: float) -> None:
        cutoff = now - self._windows[horizon]
        histogram = self.histograms[horizon]
        b = self._boundary[horizon]
        while b < len(self._samples) and self._samples[b].timestamp < cutoff:
            histogram.retire(self._samples[b].value)
            b += 1
        self._boundary[horizon] = b

    def _evict_oldest(self) -> None:
        oldest = self._samples.pop(0)
        self.histograms[Horizon.TOTAL].retire(oldest.value)
        for horizon in BOUNDED_HORIZONS:
            if self._boundary[horizon] == 0:
                # Still inside this window, so still counted
                self.histograms[horizon].retire(oldest.value)
            else:
                self._boundary[horizon] -= 1

    # --------- Accessors ---------

    @property
    def samples(self) -> List[Sample]:
        """Full history, oldest first. Callers must not mutate it."""
        return self._samples

    @property
    def newest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    @property
    def oldest(self) -> Optional[Sample]:
        return self._samples[0] if self._samples else None

    def window(self, horizon: Horizon) -> Optional[int]:
        """Width of a horizon in seconds, None for the total horizon."""
        return self._windows[horizon]

    def cutoff(self, horizon: Horizon, now: float) -> Optional[float]:
        w = self._windows[horizon]
        return None if w is None else now - w

    def boundary(self, horizon: Horizon) -> Optional[Sample]:
        """Oldest sample still counted by a bounded horizon."""
        b = self._boundary[horizon]
        return self._samples[b] if b < len(self._samples) else None

    def retained(self, horizon: Horizon) -> List[Sample]:
        """Samples currently counted by the horizon's histogram."""
        if horizon is Horizon.TOTAL:
            return list(self._samples)
        return self._samples[self._boundary[horizon]:]

    def in_window(self, horizon: Horizon, now: float) -> List[Sample]:
        cutoff = self.cutoff(horizon, now)
        if cutoff is None:
            return list(self._samples)
        return [s for s in self._samples if s.timestamp >= cutoff]

    def count(self, horizon: Horizon, now: float) -> int:
        return len(self.in_window(horizon, now))

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"SlabSeries(name='{self.name}', samples={len(self._samples)})"
