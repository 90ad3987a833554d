#=============================================================================
# File        : slabtrend/mann_kendall.py
# Project     : SlabTrend v1.0
# Component   : Trend Engine - Tie-Corrected Mann-Kendall Test
# Description : Monotonic trend test run every cycle for every cache
#               • S statistic for all three horizons in one pairwise pass
#               • Variance with tied-group correction from the histograms
#               • Continuity corrected Z score and increasing-trend decision
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Statistical Analysis
# Standards   : PEP 8, Type Hints, Immutable Results
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: math, dataclasses, enum, series
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_mann_kendall.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

"""
Mann-Kendall trend test with tie correction.

For the n samples inside a horizon::

    S     = sum over pairs i < j of sign(x_j - x_i)
    Var S = (n(n-1)(2n+5) - sum_g t_g(t_g-1)(2t_g+5)) / 18
    Z     = (S - 1)/sqrt(Var S)  if S > 0
            (S + 1)/sqrt(Var S)  if S < 0
            0                    if S == 0

A horizon reports an increasing trend when ``|Z| > critical_value`` and
``Z > 0``. S is recomputed from the whole history every cycle, so the cost
is quadratic in the number of retained samples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .series import HORIZONS, BOUNDED_HORIZONS, Horizon, SlabSeries, TieHistogram

DEFAULT_CRITICAL_VALUE = 1.96


class TrendDirection(Enum):
    """Three-valued reading of Z. Only INCREASING reaches the trend log as YES."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    NO_TREND = "no_trend"


@dataclass(frozen=True)
class HorizonStatistic:
    """Mann-Kendall result for one cache in one horizon."""
    horizon: Horizon
    n: int
    s: int
    variance: float
    first_part_variance: float
    second_part_variance: float
    z: float
    increasing: bool
    direction: TrendDirection = TrendDirection.NO_TREND

    @property
    def trend_label(self) -> str:
        return "YES" if self.increasing else "NO"

    def to_dict(self) -> Dict[str, object]:
        return {
            'horizon': self.horizon.value,
            'n': self.n,
            's': self.s,
            'variance': self.variance,
            'first_part_variance': self.first_part_variance,
            'second_part_variance': self.second_part_variance,
            'z': self.z,
            'trend': self.trend_label,
            'direction': self.direction.value,
        }


def compute_s(series: SlabSeries, now: float) -> Dict[Horizon, Dict[str, int]]:
    """
    Pairwise concordance sums and in-window counts for every horizon.

    One pass over the full history: every pair feeds the total sum, and
    feeds a bounded sum only when both samples are inside that window.
    """
    samples = series.samples
    cutoffs = {h: series.cutoff(h, now) for h in BOUNDED_HORIZONS}
    inside = {
        h: [s.timestamp >= cutoffs[h] for s in samples]
        for h in BOUNDED_HORIZONS
    }
    acc = {h: 0 for h in HORIZONS}

    count = len(samples)
    for i in range(count):
        older = samples[i].value
        for j in range(i + 1, count):
            newer = samples[j].value
            if newer > older:
                sign = 1
            elif newer < older:
                sign = -1
            else:
                continue
            acc[Horizon.TOTAL] += sign
            for h in BOUNDED_HORIZONS:
                if inside[h][i] and inside[h][j]:
                    acc[h] += sign

    result = {Horizon.TOTAL: {'s': acc[Horizon.TOTAL], 'n': count}}
    for h in BOUNDED_HORIZONS:
        result[h] = {'s': acc[h], 'n': sum(inside[h])}
    return result


def tie_corrected_variance(n: int, histogram: TieHistogram):
    """
    Return ``(variance, first_part, second_part)``.

    With fewer than two samples the variance is undefined and reported
    as zero, as is the first part.
    """
    second = float(histogram.correction())
    if n <= 1:
        return 0.0, 0.0, second
    first = float(n * (n - 1) * (2 * n + 5))
    return (first - second) / 18.0, first, second


def z_score(s: int, variance: float) -> float:
    if s == 0 or variance <= 0:
        return 0.0
    if s > 0:
        return (s - 1) / math.sqrt(variance)
    return (s + 1) / math.sqrt(variance)


def is_increasing(z: float, critical_value: float = DEFAULT_CRITICAL_VALUE) -> bool:
    return abs(z) > critical_value and z > 0


def classify(z: float, critical_value: float = DEFAULT_CRITICAL_VALUE) -> TrendDirection:
    if abs(z) <= critical_value:
        return TrendDirection.NO_TREND
    return TrendDirection.INCREASING if z > 0 else TrendDirection.DECREASING


def analyze_series(series: SlabSeries, now: float,
                   critical_value: float = DEFAULT_CRITICAL_VALUE) -> Dict[Horizon, HorizonStatistic]:
    """Run the full test for every horizon of one cache."""
    sums = compute_s(series, now)

    stats: Dict[Horizon, HorizonStatistic] = {}
    for horizon in HORIZONS:
        n = sums[horizon]['n']
        s = sums[horizon]['s']
        variance, first, second = tie_corrected_variance(n, series.histograms[horizon])
        z = z_score(s, variance) if n > 1 else 0.0
        stats[horizon] = HorizonStatistic(
            horizon=horizon,
            n=n,
            s=s,
            variance=variance,
            first_part_variance=first,
            second_part_variance=second,
            z=z,
            increasing=is_increasing(z, critical_value),
            direction=classify(z, critical_value),
        )
    return stats
