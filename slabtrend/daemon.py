#=============================================================================
# File        : slabtrend/daemon.py
# Project     : SlabTrend v1.0
# Component   : Daemon - Detach and Log Setup
# Description : Process detachment and logging handlers for the daemon
#               • Classic fork/setsid detachment from the terminal
#               • Syslog handler when detached, console handler otherwise
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Technology  : Python 3.8+, POSIX
# Standards   : PEP 8, Type Hints
# Created     : 2025-09-02
# Modified    : 2025-09-02 (Initial creation)
# Dependencies: os, sys, logging, logging.handlers
# SHA-256     : [PLACEHOLDER - Updated by CI/CD]
# Testing     : tests/test_cli.py
# License     : MIT License
# Copyright   : © 2025 Kyle Clouthier. All rights reserved.
#=============================================================================

from __future__ import annotations

import os
import sys
import logging
import logging.handlers
from typing import Optional

PACKAGE_LOGGER = "slabtrend"
SYSLOG_IDENT = "slabtrend"
SYSLOG_ADDRESS = "/dev/log"


def daemonize(workdir: str = "/") -> None:
    """
    Detach from the controlling terminal.

    The parent process exits immediately; the child becomes a session
    leader, clears its umask, moves to ``workdir`` and points the standard
    descriptors at /dev/null. POSIX only.
    """
    if os.fork() > 0:
        os._exit(0)

    os.setsid()
    os.umask(0)
    os.chdir(workdir)

    sys.stdout.flush()
    sys.stderr.flush()
    devnull = os.open(os.devnull, os.O_RDWR)
    for fd in (0, 1, 2):
        os.dup2(devnull, fd)
    if devnull > 2:
        os.close(devnull)


def configure_logging(level: str = "WARNING", use_syslog: bool = False,
                      syslog_address: Optional[str] = None) -> logging.Logger:
    """Install a single handler on the package logger and return it."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if use_syslog:
        handler: logging.Handler = logging.handlers.SysLogHandler(
            address=syslog_address or SYSLOG_ADDRESS,
            facility=logging.handlers.SysLogHandler.LOG_LOCAL1,
        )
        handler.setFormatter(logging.Formatter(f'{SYSLOG_IDENT}[{os.getpid()}]: %(levelname)s %(message)s'))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[SlabTrend] %(levelname)s: %(message)s'))
    handler.setLevel(level.upper())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
