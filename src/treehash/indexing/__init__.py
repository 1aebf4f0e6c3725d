"""Content-hash index: digest engine, codec, builder and comparator."""

from .builder import BuildEvent, BuildResult, EventKind, IndexBuilder, update_tree
from .codec import decode, encode
from .compare import compare_index_files, diff_indexes
from .digest import Sha1Digest, file_digest, new_digest
from .store import load_index, save_index
from .types import Index, IndexEntry, Timestamp

__all__ = [
    # Types
    "Index",
    "IndexEntry",
    "Timestamp",
    # Digest
    "Sha1Digest",
    "new_digest",
    "file_digest",
    # Codec and storage
    "decode",
    "encode",
    "load_index",
    "save_index",
    # Builder
    "IndexBuilder",
    "BuildResult",
    "BuildEvent",
    "EventKind",
    "update_tree",
    # Comparator
    "diff_indexes",
    "compare_index_files",
]
