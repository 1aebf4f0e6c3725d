"""Index data types."""

import os
import re
from dataclasses import dataclass
from typing import Dict, NamedTuple

from ..errors import IndexFormatError

NANOSECONDS_PER_SECOND = 1_000_000_000

_TIMESTAMP_RE = re.compile(r"(-?[0-9]+)\.([0-9]+)")


class Timestamp(NamedTuple):
    """File modification time with independent second and nanosecond parts.

    Equality is exact on both components; this is the cache-hit test.
    """
    seconds: int
    nanoseconds: int

    @classmethod
    def from_ns(cls, ns: int) -> "Timestamp":
        seconds, nanoseconds = divmod(ns, NANOSECONDS_PER_SECOND)
        return cls(seconds, nanoseconds)

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "Timestamp":
        return cls.from_ns(st.st_mtime_ns)

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse the "<seconds>.<nanoseconds>" form used in index files.

        Raises:
            IndexFormatError: If the text is not two integers joined by '.'
                or nanoseconds is out of range
        """
        match = _TIMESTAMP_RE.fullmatch(text)
        if match is None:
            raise IndexFormatError(f"Malformed modification time: {text!r}")
        nanoseconds = int(match.group(2))
        if nanoseconds >= NANOSECONDS_PER_SECOND:
            raise IndexFormatError(f"Nanoseconds out of range: {text!r}")
        return cls(int(match.group(1)), nanoseconds)

    def to_ns(self) -> int:
        return self.seconds * NANOSECONDS_PER_SECOND + self.nanoseconds

    def __str__(self) -> str:
        # Nanoseconds are not zero-padded: existing index files use "%ld.%ld"
        return f"{self.seconds}.{self.nanoseconds}"


@dataclass(frozen=True)
class IndexEntry:
    """Last known content hash of one file."""
    digest: str  # SHA-1, lowercase hex
    modified: Timestamp  # mtime when digest was computed


# Tree-relative path ("./dir/file") -> entry
Index = Dict[str, IndexEntry]
