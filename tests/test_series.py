#=============================================================================
# File        : tests/test_series.py
# Project     : SlabTrend v1.0
# Component   : Series and Retention Test Suite
# Description : Window retirement, tie histograms and total horizon growth
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import sys
from pathlib import Path

import pytest

# Add slabtrend to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from slabtrend.series import HORIZONS, Horizon, SlabSeries, TieHistogram


def feed(series, points):
    for ts, value in points:
        series.observe(ts, value)
    return series


def assert_consistent(series, now):
    for h in HORIZONS:
        hist = series.histograms[h]
        assert hist.total() == series.count(h, now), h
        assert hist.total() == len(series.retained(h)), h


class TestTieHistogram:

    def test_add_and_retire_keeps_empty_bucket(self):
        hist = TieHistogram()
        hist.add(64)
        hist.add(64)
        hist.retire(64)
        hist.retire(64)
        assert hist.tied(64) == 0
        assert 64 in hist
        assert len(hist) == 1
        assert hist.total() == 0

    def test_correction_only_counts_groups_larger_than_one(self):
        hist = TieHistogram()
        for v in (5, 5, 5, 7, 7, 9):
            hist.add(v)
        # 3*2*11 + 2*1*9
        assert hist.correction() == 84

    def test_exact_equality_lookup(self):
        hist = TieHistogram()
        hist.add(1.0)
        hist.add(1.0000001)
        assert hist.tied(1.0) == 1
        assert len(hist) == 2


class TestRetention:

    def test_first_sample_seeds_everything(self):
        series = SlabSeries("kmalloc-64")
        series.observe(0, 6400)
        assert len(series) == 1
        for h in HORIZONS:
            assert series.histograms[h].tied(6400) == 1
        assert series.boundary(Horizon.MID_TERM).timestamp == 0
        assert series.boundary(Horizon.SHORT_TERM).timestamp == 0

    def test_short_window_retirement_after_one_interval(self):
        series = feed(SlabSeries("dentry"), [(0, 100), (1000, 200)])

        short = series.histograms[Horizon.SHORT_TERM]
        assert short.tied(100) == 0
        assert 100 in short
        assert short.tied(200) == 1
        assert series.boundary(Horizon.SHORT_TERM).timestamp == 1000

        assert series.histograms[Horizon.MID_TERM].tied(100) == 1
        assert series.histograms[Horizon.TOTAL].tied(100) == 1
        assert series.boundary(Horizon.MID_TERM).timestamp == 0
        assert len(series) == 2

    def test_skipped_cycles_retire_several_samples(self):
        series = feed(SlabSeries("dentry"), [(0, 1), (30, 2), (60, 3), (2000, 4)])
        assert series.histograms[Horizon.SHORT_TERM].total() == 1
        assert series.histograms[Horizon.MID_TERM].total() == 4
        assert series.boundary(Horizon.SHORT_TERM).timestamp == 2000
        assert_consistent(series, 2000)

    def test_sample_exactly_at_cutoff_stays_in_window(self):
        series = feed(SlabSeries("dentry"), [(0, 1), (900, 2)])
        assert series.histograms[Horizon.SHORT_TERM].total() == 2
        assert series.count(Horizon.SHORT_TERM, 900) == 2

    def test_histograms_match_windows_over_long_run(self):
        series = SlabSeries("kmalloc-32")
        for i in range(300):
            now = i * 30
            series.observe(now, (i % 5) * 32)
            assert_consistent(series, now)
        assert series.histograms[Horizon.SHORT_TERM].total() == 31
        assert series.histograms[Horizon.MID_TERM].total() == 121
        assert series.histograms[Horizon.TOTAL].total() == 300

    def test_total_horizon_grows_by_one_per_observation(self):
        series = SlabSeries("buffer_head")
        for i in range(50):
            series.observe(i * 30, 10)
            assert len(series) == i + 1
        assert series.oldest.timestamp == 0
        assert series.newest.timestamp == 49 * 30

    def test_older_sample_is_rejected(self):
        series = feed(SlabSeries("dentry"), [(60, 1)])
        with pytest.raises(ValueError):
            series.observe(30, 2)

    def test_equal_timestamps_are_accepted(self):
        series = feed(SlabSeries("dentry"), [(0, 1), (0, 2), (0, 3)])
        assert len(series) == 3
        assert_consistent(series, 0)


class TestTotalCap:

    def test_cap_evicts_samples_still_inside_bounded_windows(self):
        series = SlabSeries("dentry", max_total_samples=3)
        feed(series, [(i * 30, i) for i in range(5)])
        assert [s.value for s in series.samples] == [2, 3, 4]
        assert series.histograms[Horizon.TOTAL].total() == 3
        assert series.histograms[Horizon.SHORT_TERM].total() == 3
        assert series.boundary(Horizon.SHORT_TERM).timestamp == 60
        assert_consistent(series, 120)

    def test_cap_after_bounded_retirement(self):
        series = SlabSeries("dentry", max_total_samples=2)
        feed(series, [(0, 1), (1000, 2), (2000, 3)])
        assert [s.value for s in series.samples] == [2, 3]
        assert series.histograms[Horizon.TOTAL].total() == 2
        assert series.histograms[Horizon.MID_TERM].total() == 2
        assert series.histograms[Horizon.SHORT_TERM].total() == 1
        assert series.boundary(Horizon.SHORT_TERM).timestamp == 2000
        assert_consistent(series, 2000)
