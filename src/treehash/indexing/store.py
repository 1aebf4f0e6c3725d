"""Loading and atomic saving of index files."""

import logging
import os
from pathlib import Path

from ..errors import FilesystemError, ResourceNotFoundError
from .codec import decode, encode
from .types import Index

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


def temp_path_for(index_path: Path) -> Path:
    """Sibling file the index is written to before the rename."""
    return index_path.with_name(index_path.name + TEMP_SUFFIX)


def load_index(index_path: Path) -> Index:
    """Read and decode an index file.

    Args:
        index_path: Index file location

    Returns:
        Decoded index

    Raises:
        ResourceNotFoundError: If the file does not exist
        FilesystemError: If the file exists but cannot be read
        IndexFormatError: If the contents are corrupt
    """
    index_path = Path(index_path)
    try:
        data = index_path.read_bytes()
    except FileNotFoundError as e:
        raise ResourceNotFoundError(f"Index file not found: {index_path}") from e
    except OSError as e:
        raise FilesystemError(index_path, e) from e

    index = decode(data)
    logger.debug(f"Loaded {len(index)} entries from {index_path}")
    return index


def save_index(index_path: Path, index: Index) -> None:
    """Write an index atomically.

    Data goes to "<name>.tmp" next to the index, is fsynced, then renamed over
    the index. Readers see either the previous or the new complete file.

    Raises:
        FilesystemError: If writing or renaming fails (the temp file is removed)
    """
    index_path = Path(index_path)
    tmp_path = temp_path_for(index_path)
    data = encode(index)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, index_path)
    except OSError as e:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"Could not remove temporary index {tmp_path}")
        raise FilesystemError(index_path, e) from e

    logger.debug(f"Wrote {len(index)} entries ({len(data)} bytes) to {index_path}")
