#!/usr/bin/env python3
"""
SlabTrend CLI Interface

Command-line entry point for the slab trend daemon.
"""

import argparse
import logging
import os
import signal
import sys

from . import __version__
from .config import SlabTrendConfig, DEFAULT_SORT_KEY
from .daemon import configure_logging, daemonize
from .errors import InvalidConfiguration, SlabTrendError
from .monitor import SlabMonitor
from .report import TrendLogWriter
from .sampling import SelfMemoryTracker

_logger = logging.getLogger(__name__)


def create_parser():
    """Create the argument parser for the SlabTrend CLI."""
    parser = argparse.ArgumentParser(
        prog='slabtrend',
        description=f'SlabTrend {__version__} - Mann-Kendall trend detection for kernel slab caches',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The following are valid sort criteria:
  a: sort by number of active objects
  n: sort by name
  s: sort by object size

Examples:
  slabtrend --delay 30 --sort a
  SLABTREND_FOREGROUND=1 slabtrend -d 10 -s n
        """
    )

    parser.add_argument('--delay', '-d', type=int, default=SlabTrendConfig.delay_s,
                        metavar='N', help='delay N seconds between updates (default: 30)')
    parser.add_argument('--sort', '-s', type=str, default=DEFAULT_SORT_KEY,
                        metavar='S', help='specify sort criteria S (see below)')
    return parser


def _install_signal_handlers(monitor: SlabMonitor) -> None:
    def _handle(signum, frame):
        _logger.info(f"Received signal {signum}, stopping after current cycle")
        monitor.stop()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = SlabTrendConfig.from_env(
            SlabTrendConfig(delay_s=args.delay, sort_key=args.sort))
    except InvalidConfiguration as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    # Resolve before detaching changes the working directory
    config = config.merge(log_path=os.path.abspath(config.log_path))

    if not config.foreground:
        daemonize()
    configure_logging(config.log_level, use_syslog=not config.foreground)

    writer = TrendLogWriter(config.log_path)
    monitor = SlabMonitor(config, writer=writer, memory_tracker=SelfMemoryTracker())
    _install_signal_handlers(monitor)

    try:
        with writer:
            monitor.run()
    except SlabTrendError as e:
        _logger.error(f"SlabTrend terminated: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
