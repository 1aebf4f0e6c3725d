"""Command wrapper utilities for consistent error handling and logging.

This module provides decorators and context managers for CLI command functions
that standardize:
- Start/finish logging of each command
- Error handling with proper exit codes
- Fatal error reporting on stderr (or as a JSON error response)

Example:
    @with_error_handling("update", error_prefix="Update failed")
    def update_command(path: str, output_json: bool):
        # Just the business logic, no try/except needed
        update_tree(Path(path), config)
"""

import functools
import logging
import sys
import time
from contextlib import contextmanager
from typing import Callable

from ...errors import EXIT_ERROR, TreehashError
from ..output import print_error

logger = logging.getLogger(__name__)


@contextmanager
def command_context(
    operation: str,
    output_json: bool = False,
    error_prefix: str = "Failed",
):
    """Context manager for CLI command error handling and logging.

    Args:
        operation: Command name used in log records (e.g., "update")
        output_json: Whether JSON output mode is enabled
        error_prefix: Prefix for unexpected error messages

    Raises:
        SystemExit: With the exception's exit code on TreehashError,
            EXIT_ERROR on any other exception

    Example:
        def my_command(path: str, output_json: bool):
            with command_context("compare", output_json):
                compare_index_files(local, remote)
    """
    started = time.monotonic()
    logger.debug(f"{operation}: started")

    try:
        yield
        logger.debug(f"{operation}: finished in {time.monotonic() - started:.2f}s")

    except TreehashError as e:
        logger.debug(f"{operation}: failed with {type(e).__name__}")
        print_error(str(e), output_json)
        sys.exit(e.exit_code)

    except Exception as e:
        logger.debug(f"{operation}: failed", exc_info=True)
        print_error(f"{error_prefix}: {e}", output_json)
        sys.exit(EXIT_ERROR)


def with_error_handling(operation: str, error_prefix: str = "Failed"):
    """Decorator for CLI command functions with consistent error handling.

    The decorated function should accept output_json as a keyword argument;
    when absent, text output is assumed.

    Args:
        operation: Command name used in log records
        error_prefix: Prefix for unexpected error messages

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            output_json = kwargs.get('output_json', False)
            with command_context(operation, output_json=output_json, error_prefix=error_prefix):
                return func(*args, **kwargs)

        return wrapper
    return decorator
