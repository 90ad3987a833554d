#=============================================================================
# File        : slabtrend/report.py
# Project     : SlabTrend v1.0
# Component   : Report - Trend Records and the Trend Log
# Description : Per-cache, per-cycle output records and their log file
#               • TrendRecord with semicolon delimited log rendering
#               • Append-only TrendLogWriter with header and cycle markers
#               • Explicit errors for unwritable log files
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses
# Standards   : PEP 8, Type Hints, Immutable Data Structures
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: dataclasses, typing, logging, mann_kendall, sampling, errors
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_report.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, TextIO

from .errors import LogWriteError
from .mann_kendall import HorizonStatistic
from .sampling import SlabSample
from .series import HORIZONS, Horizon

_logger = logging.getLogger(__name__)

LOG_HEADER = (
    "TIMESTAMP;ACTIVEOBJS;OBJSIZE;SLAB NAME;"
    "ACT;CT;VT;FVT;SVT;ZT;TrendTOTAL;"
    "ACM;CM;VM;FVM;SVM;ZM;TRENDMIDTERM;"
    "ACS;CS;VS;FVS;SVS;ZS;TRENDSHORTTERM"
)
CYCLE_END_MARKER = "----ENDED----"


def _format_horizon(stat: HorizonStatistic) -> str:
    return (f"{stat.s:d};{stat.n:d};{stat.variance:f};"
            f"{stat.first_part_variance:e};{stat.second_part_variance:e};"
            f"{stat.z:f};{stat.trend_label:<10s}")


@dataclass(frozen=True)
class TrendRecord:
    """Output of one cycle for one cache."""
    timestamp: float
    sample: SlabSample
    statistics: Dict[Horizon, HorizonStatistic]

    @property
    def name(self) -> str:
        return self.sample.name

    def increasing_horizons(self) -> List[Horizon]:
        return [h for h in HORIZONS if self.statistics[h].increasing]

    def to_log_line(self) -> str:
        """Render one delimited line: identity fields then seven per horizon."""
        head = (f"{int(self.timestamp):d};{self.sample.active_objects:6d};"
                f"{self.sample.object_size:6d};{self.sample.name:<23s}")
        parts = [head] + [_format_horizon(self.statistics[h]) for h in HORIZONS]
        return ";".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'name': self.sample.name,
            'active_objects': self.sample.active_objects,
            'object_size': self.sample.object_size,
            'horizons': {h.value: self.statistics[h].to_dict() for h in HORIZONS},
        }


class TrendLogWriter:
    """
    Append-only trend log.

    The header goes out once when the writer is opened; each cycle
    appends its records followed by an end marker and is flushed.
    """

    def __init__(self, path: str, write_header: bool = True) -> None:
        self.path = path
        self._write_header = write_header
        self._fh: Optional[TextIO] = None
        self.cycles_written = 0

    def open(self) -> "TrendLogWriter":
        if self._fh is not None:
            return self
        try:
            self._fh = open(self.path, "a", encoding="utf-8")
            if self._write_header:
                self._fh.write(LOG_HEADER + "\n")
                self._fh.flush()
        except OSError as e:
            self._fh = None
            raise LogWriteError(self.path, e.strerror or str(e)) from e
        _logger.debug(f"Trend log opened at {self.path}")
        return self

    def write_cycle(self, records: Iterable[TrendRecord]) -> int:
        """Append one cycle's records; returns the number of lines written."""
        if self._fh is None:
            raise LogWriteError(self.path, "log is not open")
        count = 0
        try:
            for record in records:
                self._fh.write(record.to_log_line() + "\n")
                count += 1
            self._fh.write(CYCLE_END_MARKER + "\n")
            self._fh.flush()
        except OSError as e:
            raise LogWriteError(self.path, e.strerror or str(e)) from e
        self.cycles_written += 1
        return count

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.close()
        except OSError as e:
            raise LogWriteError(self.path, e.strerror or str(e)) from e
        finally:
            self._fh = None

    def __enter__(self) -> "TrendLogWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
