#=============================================================================
# File        : tests/test_report.py
# Project     : SlabTrend v1.0
# Component   : Report Test Suite
# Description : Trend record rendering and trend log writer behaviour
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import sys
from pathlib import Path

import pytest

# Add slabtrend to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from slabtrend.errors import LogWriteError
from slabtrend.mann_kendall import analyze_series
from slabtrend.report import CYCLE_END_MARKER, LOG_HEADER, TrendLogWriter, TrendRecord
from slabtrend.sampling import SlabSample
from slabtrend.series import SlabSeries


def make_record(values, name="kmalloc-64", delay=30):
    series = SlabSeries(name)
    for i, v in enumerate(values):
        series.observe(i * delay, v)
    now = (len(values) - 1) * delay
    sample = SlabSample(name, object_size=64, active_objects=values[-1] // 64)
    return TrendRecord(timestamp=now, sample=sample, statistics=analyze_series(series, now))


def test_header_has_twenty_five_columns():
    assert len(LOG_HEADER.split(";")) == 25
    assert LOG_HEADER.startswith("TIMESTAMP;ACTIVEOBJS;OBJSIZE;SLAB NAME;")


def test_log_line_layout():
    record = make_record([6400, 12800, 19200])
    fields = record.to_log_line().split(";")
    assert len(fields) == 25
    assert fields[0] == "60"
    assert fields[1].strip() == "300"
    assert fields[2].strip() == "64"
    assert fields[3].strip() == "kmalloc-64"
    # total horizon: S, n, variance, first part, second part, Z, trend
    assert fields[4] == "3"
    assert fields[5] == "3"
    assert float(fields[6]) == pytest.approx(66 / 18, abs=1e-6)
    assert float(fields[7]) == 66.0
    assert float(fields[8]) == 0.0
    assert fields[10].strip() == "NO"
    assert fields[10] == "NO        "


def test_log_line_reports_yes_for_increasing():
    record = make_record([64 * i for i in range(1, 31)])
    fields = record.to_log_line().split(";")
    assert [fields[i].strip() for i in (10, 17, 24)] == ["YES", "YES", "YES"]
    assert len(record.increasing_horizons()) == 3


def test_to_dict():
    data = make_record([64, 128]).to_dict()
    assert data['name'] == "kmalloc-64"
    assert data['horizons']['total']['s'] == 1
    assert data['horizons']['short']['trend'] == "NO"


def test_writer_appends_header_once_and_cycle_markers(tmp_path):
    path = tmp_path / "SLABLog.txt"
    with TrendLogWriter(str(path)) as writer:
        assert writer.write_cycle([make_record([64])]) == 1
        assert writer.write_cycle([make_record([64]), make_record([64], name="dentry")]) == 2
        assert writer.cycles_written == 2

    lines = path.read_text().splitlines()
    assert lines[0] == LOG_HEADER
    assert lines.count(LOG_HEADER) == 1
    assert lines.count(CYCLE_END_MARKER) == 2
    assert len(lines) == 1 + 1 + 1 + 2 + 1


def test_writer_appends_to_existing_file(tmp_path):
    path = tmp_path / "SLABLog.txt"
    path.write_text("previous run\n")
    with TrendLogWriter(str(path)):
        pass
    assert path.read_text().splitlines() == ["previous run", LOG_HEADER]


def test_writer_open_failure(tmp_path):
    with pytest.raises(LogWriteError):
        TrendLogWriter(str(tmp_path)).open()


def test_writer_requires_open(tmp_path):
    writer = TrendLogWriter(str(tmp_path / "log.txt"))
    with pytest.raises(LogWriteError):
        writer.write_cycle([])
