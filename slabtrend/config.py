#=============================================================================
# File        : slabtrend/config.py
# Project     : SlabTrend v1.0
# Component   : Configuration - SlabTrend Configuration Dataclass
# Description : Central configuration with validation, env overrides, and
#               horizon widths for the trend engine.
#               • Validation & coercion for safe values
#               • Environment variable overrides for ops
#               • Sort key fallback policy
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, Dataclasses, Type Literals
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: dataclasses, typing, os, logging, errors
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_config.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, replace
from typing import Optional, Literal, Tuple

from .errors import InvalidConfiguration

_logger = logging.getLogger(__name__)

SortKey = Literal["a", "n", "s"]

SORT_KEYS: Tuple[str, ...] = ("a", "n", "s")
DEFAULT_SORT_KEY: SortKey = "a"

MID_TERM_S = 3600
SHORT_TERM_S = 900


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None: return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None: return default
    try:
        return float(v)
    except ValueError:
        return default

def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    v = os.getenv(name)
    if v is None: return default
    try:
        return int(v)
    except ValueError:
        return default


def normalize_sort_key(key: Optional[str]) -> SortKey:
    """
    Map a user supplied sort key to a known one.

    Only the first character counts, as with ``-s name``. Anything
    unrecognized falls back to sorting by active objects; that is a
    policy, not an error.
    """
    if key:
        k = key[0]
        if k in SORT_KEYS:
            return k  # type: ignore[return-value]
    _logger.debug(f"Unrecognized sort key {key!r}, using '{DEFAULT_SORT_KEY}'")
    return DEFAULT_SORT_KEY


@dataclass(frozen=True)
class SlabTrendConfig:
    """
    SlabTrend runtime configuration.

    Defaults mirror the classic slab daemon:
      - 30 second cycles
      - active-object ordering
      - 1.96 critical value (two sided 95%)
      - unbounded total history
    """
    delay_s: int = 30
    sort_key: str = DEFAULT_SORT_KEY
    critical_value: float = 1.96

    # Bounded horizon widths in seconds
    mid_term_s: int = MID_TERM_S
    short_term_s: int = SHORT_TERM_S

    log_path: str = "SLABLog.txt"
    slabinfo_path: str = "/proc/slabinfo"

    # None keeps every sample for the life of the process
    max_total_samples: Optional[int] = None

    foreground: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.delay_s < 0:
            raise InvalidConfiguration("can't have a negative delay")
        if self.critical_value <= 0:
            raise InvalidConfiguration(f"critical value must be positive, got {self.critical_value}")
        if self.mid_term_s <= 0 or self.short_term_s <= 0:
            raise InvalidConfiguration("horizon widths must be positive")
        if self.max_total_samples is not None and self.max_total_samples < 1:
            raise InvalidConfiguration(
                f"max_total_samples must be at least 1, got {self.max_total_samples}")

        # Apply normalized values into frozen dataclass
        object.__setattr__(self, "sort_key", normalize_sort_key(self.sort_key))
        object.__setattr__(self, "log_level", str(self.log_level).upper())

    # --------- Factory helpers ---------

    @staticmethod
    def from_env(base: Optional["SlabTrendConfig"] = None) -> "SlabTrendConfig":
        """
        Build config from environment variables, overlaying a base config.
        Supported envs:
          SLABTREND_LOG_PATH
          SLABTREND_SLABINFO_PATH
          SLABTREND_CRITICAL_VALUE
          SLABTREND_MAX_TOTAL_SAMPLES
          SLABTREND_FOREGROUND (0|1)
          SLABTREND_LOG_LEVEL
        """
        base = base or SlabTrendConfig()
        return replace(
            base,
            log_path=os.getenv("SLABTREND_LOG_PATH", base.log_path),
            slabinfo_path=os.getenv("SLABTREND_SLABINFO_PATH", base.slabinfo_path),
            critical_value=_env_float("SLABTREND_CRITICAL_VALUE", base.critical_value),
            max_total_samples=_env_int("SLABTREND_MAX_TOTAL_SAMPLES", base.max_total_samples),
            foreground=_env_bool("SLABTREND_FOREGROUND", base.foreground),
            log_level=os.getenv("SLABTREND_LOG_LEVEL", base.log_level),
        )

    def merge(self, **overrides) -> "SlabTrendConfig":
        """Return a copy with provided fields overridden (immutably)."""
        return replace(self, **overrides)

    def __repr__(self) -> str:
        return (f"SlabTrendConfig(delay_s={self.delay_s}, sort_key='{self.sort_key}', "
                f"critical_value={self.critical_value}, mid_term_s={self.mid_term_s}, "
                f"short_term_s={self.short_term_s}, log_path='{self.log_path}', "
                f"max_total_samples={self.max_total_samples}, foreground={self.foreground})")
