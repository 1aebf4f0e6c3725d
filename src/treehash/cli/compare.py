"""CLI command for comparing two hash indexes."""

import logging

from ..indexing.compare import compare_index_files
from .core.command_wrapper import with_error_handling
from .logging_config import setup_logging
from .output import print_json, print_line

logger = logging.getLogger(__name__)


@with_error_handling("compare", error_prefix="Compare failed")
def compare_command(local: str, remote: str, verbose: bool, output_json: bool = False):
    """Print remote paths whose content has no copy in the local index.

    Args:
        local: Local index file
        remote: Remote index file
        verbose: Verbose output
        output_json: Output JSON format
    """
    setup_logging(verbose=verbose)

    missing = compare_index_files(local, remote)

    if output_json:
        print_json(
            "success",
            f"{len(missing)} remote files missing locally",
            data={"local": local, "remote": remote, "missing": missing},
        )
        return

    for path in missing:
        print_line(path)
