"""Output formatting utilities for CLI commands.

Text mode prints the changelog and results to stdout and errors to stderr.
JSON mode prints a single response object per command.
"""

import json
import sys
from typing import Any, Dict, List, Optional


def format_json_response(
    status: str,
    message: str = "",
    data: Optional[Dict[str, Any]] = None,
    errors: Optional[List[str]] = None
) -> str:
    """Format a consistent JSON response.

    Args:
        status: "success" or "error"
        message: Human-readable summary
        data: Command-specific data (optional)
        errors: List of error messages (optional)

    Returns:
        JSON string formatted for output

    Example:
        >>> format_json_response("success", "Index updated", {"added": 2})
        '{"status": "success", "message": "Index updated", "data": {"added": 2}, "errors": []}'
    """
    response = {
        "status": status,
        "message": message,
        "data": data or {},
        "errors": errors or []
    }
    return json.dumps(response, indent=2)


def print_json(
    status: str,
    message: str = "",
    data: Optional[Dict[str, Any]] = None,
    errors: Optional[List[str]] = None
):
    """Print JSON response to stdout."""
    print(format_json_response(status, message, data, errors))


def print_error(message: str, json_output: bool = False):
    """Print error message with [ERROR] prefix.

    Args:
        message: Error message
        json_output: If True, output JSON format instead
    """
    if json_output:
        print_json("error", f"[ERROR] {message}", errors=[message])
    else:
        print(f"[ERROR] {message}", file=sys.stderr)


def print_line(message: str, json_output: bool = False):
    """Print one changelog or result line (text mode only)."""
    if not json_output:
        print(message)

