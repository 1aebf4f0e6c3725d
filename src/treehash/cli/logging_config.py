"""Centralized logging configuration for CLI commands.

Provides three logging levels:
- Default: Clean output, warnings and errors only
- Verbose: Show walk statistics and persistence decisions
- Debug: Show everything, including per-file cache hits

Log records go to stderr; stdout is reserved for the run's changelog.
"""

import logging
import sys


def _configure(level: int, fmt: str):
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)


def setup_logging_default():
    """Default logging: only warnings and errors."""
    _configure(logging.WARNING, '%(levelname)s: %(message)s')
    logging.getLogger('treehash').setLevel(logging.WARNING)


def setup_logging_verbose():
    """Verbose logging: show per-run statistics.

    Shows:
    - Files walked, unchanged, added and skipped
    - Whether the index was written
    - Index load details
    """
    _configure(logging.INFO, '%(levelname)s: %(message)s')
    logging.getLogger('treehash').setLevel(logging.INFO)


def setup_logging_debug():
    """Debug logging: show everything.

    Use for:
    - Seeing every cache hit and ignored file
    - Investigating corrupt index files
    """
    _configure(logging.DEBUG, '%(name)s - %(levelname)s: %(message)s')
    logging.getLogger('treehash').setLevel(logging.DEBUG)


def setup_logging(verbose: bool = False, debug: bool = False):
    """Pick a logging setup from the --verbose/--debug flags."""
    if debug:
        setup_logging_debug()
    elif verbose:
        setup_logging_verbose()
    else:
        setup_logging_default()
