"""CLI command for refreshing a tree's hash index."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..config import BuilderConfig, TreehashConfig, load_config
from ..errors import InvalidArgumentError
from ..indexing.builder import BuildEvent, BuildResult, EventKind, update_tree
from .core.command_wrapper import with_error_handling
from .logging_config import setup_logging
from .output import print_json, print_line

console = Console()
logger = logging.getLogger(__name__)


def resolve_builder_config(
    config_path: Optional[str],
    remove_missing: bool,
    ignore_days: Optional[int],
    ignore_mode: Optional[str],
    index_file: Optional[str],
    settle_seconds: Optional[float],
    max_depth: Optional[int],
    no_follow_symlinks: bool,
    backend: Optional[str],
) -> BuilderConfig:
    """Merge the optional YAML config with command line overrides.

    Flags that were not given leave the configured value alone.

    Raises:
        InvalidArgumentError: If the merged configuration is invalid
    """
    if config_path:
        try:
            base = load_config(Path(config_path)).builder
        except FileNotFoundError as e:
            raise InvalidArgumentError(str(e)) from e
    else:
        base = TreehashConfig().builder

    overrides = {}
    if remove_missing:
        overrides['remove_missing'] = True
    if ignore_days is not None:
        overrides['ignore_older_than_days'] = ignore_days or None
    if ignore_mode is not None:
        overrides['ignore_mode'] = ignore_mode
    if index_file is not None:
        overrides['index_name'] = index_file
    if settle_seconds is not None:
        overrides['settle_seconds'] = settle_seconds
    if max_depth is not None:
        overrides['max_depth'] = max_depth
    if no_follow_symlinks:
        overrides['follow_symlinks'] = False
    if backend is not None:
        overrides['digest_backend'] = backend

    try:
        return BuilderConfig(**{**base.model_dump(), **overrides})
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid options: {e}") from e


def summary_lines(result: BuildResult, config: BuilderConfig) -> list[str]:
    """Lines printed for event categories that had no activity."""
    lines = []
    if not result.count(EventKind.ADD) and not result.count(EventKind.MODIFY):
        lines.append("No new or modified files.")
    if config.remove_missing and not result.count(EventKind.REMOVE):
        lines.append("No missing files.")
    if config.ignore_older_than_ns is not None and not result.count(EventKind.EXPIRE):
        lines.append("No expired files.")
    return lines


def _print_summary_table(result: BuildResult):
    table = Table(title="Index update")
    table.add_column("Category", style="cyan")
    table.add_column("Files", justify="right")

    table.add_row("Walked", str(result.files_seen))
    table.add_row("Unchanged", str(result.cache_hits))
    table.add_row("Added", str(result.count(EventKind.ADD)))
    table.add_row("Modified", str(result.count(EventKind.MODIFY)))
    table.add_row("Removed", str(result.count(EventKind.REMOVE)))
    table.add_row("Expired", str(result.count(EventKind.EXPIRE)))
    table.add_row("Skipped", str(result.count(EventKind.SKIP)))
    table.add_row("Ignored (too old)", str(result.ignored))
    table.add_row("Entries in index", str(len(result.index)))

    console.print(table)


@with_error_handling("update", error_prefix="Update failed")
def update_command(
    path: str,
    config_path: Optional[str],
    remove_missing: bool,
    ignore_days: Optional[int],
    ignore_mode: Optional[str],
    index_file: Optional[str],
    settle_seconds: Optional[float],
    max_depth: Optional[int],
    no_follow_symlinks: bool,
    backend: Optional[str],
    verbose: bool,
    debug: bool,
    output_json: bool = False,
):
    """Refresh the hash index stored at the root of a directory tree.

    Args:
        path: Tree root
        config_path: Optional YAML configuration file
        remove_missing: Drop entries for files that no longer exist
        ignore_days: Ignore/expire files older than this many days (0 disables)
        ignore_mode: "exclude" or "expire"
        index_file: Index file name inside the root
        settle_seconds: Defer files modified more recently than this
        max_depth: Maximum directory depth to descend
        no_follow_symlinks: Treat symbolic links as non-regular files
        backend: Digest engine ("hashlib" or "python")
        verbose: Verbose output
        debug: Debug mode
        output_json: Output JSON format
    """
    setup_logging(verbose=verbose, debug=debug)

    config = resolve_builder_config(
        config_path, remove_missing, ignore_days, ignore_mode, index_file,
        settle_seconds, max_depth, no_follow_symlinks, backend,
    )
    logger.info(f"Updating {config.index_name} in {path}")

    def on_event(event: BuildEvent):
        print_line(event.describe(), output_json)

    def on_missing_index(index_path: Path):
        print_line(f"No existing {index_path.name} file", output_json)

    result = update_tree(Path(path), config, on_event=on_event, on_missing_index=on_missing_index)

    if output_json:
        print_json(
            "success",
            "Index updated" if result.written else "Index unchanged",
            data={
                "index": str(result.index_path),
                "changed": result.changed,
                "created": not result.prior_existed,
                "entries": len(result.index),
                "events": [
                    {"event": event.kind.value, "path": event.path, "reason": event.reason}
                    for event in result.events
                ],
            },
        )
        return

    for line in summary_lines(result, config):
        print_line(line)

    if verbose or debug:
        _print_summary_table(result)
