"""Content-presence comparison of two indexes.

A remote file is reported when no local file, under any name, has the same
digest. A file that was only renamed is therefore not reported.
"""

import logging
from pathlib import Path
from typing import List

from .store import load_index
from .types import Index

logger = logging.getLogger(__name__)


def diff_indexes(local: Index, remote: Index) -> List[str]:
    """Return remote paths whose content is missing locally.

    Args:
        local: Index of the local tree
        remote: Index of the remote tree

    Returns:
        Remote paths, in remote iteration order

    Example:
        local {./a: X}, remote {./b: X, ./c: Y} -> ['./c']
    """
    local_digests = {entry.digest for entry in local.values()}
    return [path for path, entry in remote.items() if entry.digest not in local_digests]


def compare_index_files(local_path: Path, remote_path: Path) -> List[str]:
    """Load two index files and diff them.

    Raises:
        ResourceNotFoundError: If either file does not exist
        FilesystemError: If either file cannot be read
        IndexFormatError: If either file is corrupt
    """
    local = load_index(Path(local_path))
    remote = load_index(Path(remote_path))
    missing = diff_indexes(local, remote)
    logger.info(
        f"{len(missing)} of {len(remote)} remote files have no local copy "
        f"({len(local)} local entries)"
    )
    return missing
