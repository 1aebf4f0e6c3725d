"""Binary index file codec.

File format, one record per tracked file:

    path NUL seconds.nanoseconds NUL hexdigest NUL TERM

TERM is a NUL byte (written by encode) or a newline (accepted from older
files). A single newline following a NUL terminator is skipped. Parsing is
strict: truncated records and malformed fields raise instead of being
dropped, since silently losing entries would hide missing content.
"""

import logging
import os

from ..errors import IndexFormatError, IndexTruncatedError
from .types import Index, IndexEntry, Timestamp

logger = logging.getLogger(__name__)

NUL = 0
NEWLINE = 0x0A


def _read_field(data: bytes, pos: int, name: str) -> tuple[bytes, int]:
    end = data.find(b"\x00", pos)
    if end < 0:
        raise IndexTruncatedError(f"Index truncated in {name} field", pos)
    return data[pos:end], end + 1


def _ascii(raw: bytes, name: str, offset: int) -> str:
    try:
        return raw.decode('ascii')
    except UnicodeDecodeError:
        raise IndexFormatError(f"Non-ASCII bytes in {name} field", offset) from None


def decode(data: bytes) -> Index:
    """Parse index file contents.

    Args:
        data: Raw file contents (empty means no entries)

    Returns:
        Mapping of path to IndexEntry; later duplicates replace earlier ones

    Raises:
        IndexTruncatedError: If the data ends inside a record
        IndexFormatError: If a timestamp or terminator is malformed
    """
    index: Index = {}
    pos = 0
    size = len(data)

    while pos < size:
        record_start = pos
        raw_path, pos = _read_field(data, pos, "path")
        modified_start = pos
        raw_modified, pos = _read_field(data, pos, "modified")
        digest_start = pos
        raw_digest, pos = _read_field(data, pos, "digest")

        if pos >= size:
            raise IndexTruncatedError("Index truncated before record terminator", pos)
        terminator = data[pos]
        if terminator not in (NUL, NEWLINE):
            raise IndexFormatError("Expected NUL or newline after record", pos)
        pos += 1
        if terminator == NUL and pos < size and data[pos] == NEWLINE:
            pos += 1

        try:
            modified = Timestamp.parse(_ascii(raw_modified, "modified", modified_start))
        except IndexFormatError as e:
            if e.offset is not None:
                raise
            raise IndexFormatError(str(e), modified_start) from None
        digest = _ascii(raw_digest, "digest", digest_start)

        path = os.fsdecode(raw_path)
        if path in index:
            logger.debug(f"Duplicate index record for {path} at byte {record_start}")
        index[path] = IndexEntry(digest=digest, modified=modified)

    return index


def encode(index: Index) -> bytes:
    """Serialize an index.

    Records are written in path order so identical indexes produce identical
    files. Readers must not depend on the order.

    Raises:
        IndexFormatError: If a path contains a NUL byte
    """
    parts = []
    for path in sorted(index):
        entry = index[path]
        raw_path = os.fsencode(path)
        if b"\x00" in raw_path:
            raise IndexFormatError(f"Path contains NUL byte: {path!r}")
        parts.append(raw_path)
        parts.append(b"\x00")
        parts.append(str(entry.modified).encode('ascii'))
        parts.append(b"\x00")
        parts.append(entry.digest.encode('ascii'))
        parts.append(b"\x00\x00")
    return b"".join(parts)
