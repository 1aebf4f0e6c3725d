"""Streaming SHA-1 content digests.

Two interchangeable engines share the start/process/finish contract:

- Sha1Digest: pure Python implementation of the SHA-1 block compression
- HashlibSha1Digest: the same contract backed by hashlib (default, much faster)

file_digest() streams a file through either engine and returns the
40-character lowercase hex digest stored in the index.
"""

import hashlib
import struct
from pathlib import Path
from typing import Literal, Union

from ..errors import FilesystemError

DigestBackend = Literal["hashlib", "python"]

BLOCK_SIZE = 64
DIGEST_SIZE = 20
HEX_DIGEST_LENGTH = DIGEST_SIZE * 2

# 1 MiB reads
DEFAULT_CHUNK_SIZE = 1024 * 1024

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
_MASK = 0xFFFFFFFF
_BLOCK = struct.Struct(">16I")


def _rotl(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK


def _compress(state: tuple, block) -> tuple:
    """Run the 80-round SHA-1 compression over one 64-byte block."""
    w = list(_BLOCK.unpack(block))
    for i in range(16, 80):
        w.append(_rotl(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))

    a, b, c, d, e = state
    for i in range(80):
        if i < 20:
            f = (b & c) | (~b & d)
            k = 0x5A827999
        elif i < 40:
            f = b ^ c ^ d
            k = 0x6ED9EBA1
        elif i < 60:
            f = (b & c) | (b & d) | (c & d)
            k = 0x8F1BBCDC
        else:
            f = b ^ c ^ d
            k = 0xCA62C1D6
        temp = (_rotl(a, 5) + f + e + k + w[i]) & _MASK
        e = d
        d = c
        c = _rotl(b, 30)
        b = a
        a = temp

    return (
        (state[0] + a) & _MASK,
        (state[1] + b) & _MASK,
        (state[2] + c) & _MASK,
        (state[3] + d) & _MASK,
        (state[4] + e) & _MASK,
    )


class Sha1Digest:
    """Incremental SHA-1 accumulator.

    State is a partially filled 64-byte block, the five running hash words and
    a 64-bit count of bytes processed. Call start() before the first
    process(); finish() consumes the state.

    Example:
        >>> d = Sha1Digest()
        >>> d.start()
        >>> d.process(b"ab")
        >>> d.process(b"c")
        >>> d.finish().hex()
        'a9993e364706816aba3e25717850c26c9cd0d89d'
    """

    name = "python"

    def __init__(self):
        self._state = None
        self._buffer = bytearray()
        self._total = 0

    def start(self) -> None:
        self._state = _INITIAL_STATE
        self._buffer = bytearray()
        self._total = 0

    def process(self, data: Union[bytes, bytearray, memoryview]) -> None:
        if self._state is None:
            raise RuntimeError("digest not started")

        view = memoryview(data)
        self._total = (self._total + len(view)) & 0xFFFFFFFFFFFFFFFF
        offset = 0

        # Top up a partial block left over from the previous call
        if self._buffer:
            take = min(BLOCK_SIZE - len(self._buffer), len(view))
            self._buffer += view[:take]
            offset = take
            if len(self._buffer) < BLOCK_SIZE:
                return
            self._state = _compress(self._state, self._buffer)
            self._buffer = bytearray()

        end = len(view) - (len(view) - offset) % BLOCK_SIZE
        state = self._state
        for start in range(offset, end, BLOCK_SIZE):
            state = _compress(state, view[start:start + BLOCK_SIZE])
        self._state = state
        self._buffer += view[end:]

    def finish(self) -> bytes:
        """Pad, compress the final block(s) and return the 20-byte digest."""
        if self._state is None:
            raise RuntimeError("digest not started")

        bit_length = (self._total * 8) & 0xFFFFFFFFFFFFFFFF
        tail = bytes(self._buffer) + b"\x80"
        # Fewer than 8 bytes left for the length: spill into an extra block
        tail += b"\x00" * ((56 - len(tail)) % BLOCK_SIZE)
        tail += struct.pack(">Q", bit_length)

        state = self._state
        for start in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[start:start + BLOCK_SIZE])

        self._state = None
        self._buffer = bytearray()
        self._total = 0
        return struct.pack(">5I", *state)


class HashlibSha1Digest:
    """hashlib-backed engine with the Sha1Digest contract."""

    name = "hashlib"

    def __init__(self):
        self._hasher = None

    def start(self) -> None:
        self._hasher = hashlib.sha1()

    def process(self, data: Union[bytes, bytearray, memoryview]) -> None:
        if self._hasher is None:
            raise RuntimeError("digest not started")
        self._hasher.update(data)

    def finish(self) -> bytes:
        if self._hasher is None:
            raise RuntimeError("digest not started")
        digest = self._hasher.digest()
        self._hasher = None
        return digest


_BACKENDS = {
    "hashlib": HashlibSha1Digest,
    "python": Sha1Digest,
}


def new_digest(backend: DigestBackend = "hashlib"):
    """Create an unstarted digest engine for the named backend."""
    try:
        return _BACKENDS[backend]()
    except KeyError:
        raise ValueError(f"Unknown digest backend: {backend}. Available: {list(_BACKENDS)}") from None


def file_digest(
    file_path: Path,
    backend: DigestBackend = "hashlib",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Stream a file through the digest engine.

    Args:
        file_path: File to hash (read sequentially in binary mode)
        backend: Digest engine to use
        chunk_size: Read size per process() call

    Returns:
        SHA-1 digest as 40 lowercase hex characters

    Raises:
        FilesystemError: If the file cannot be opened or read
    """
    engine = new_digest(backend)
    engine.start()
    try:
        with open(file_path, 'rb') as f:
            while chunk := f.read(chunk_size):
                engine.process(chunk)
    except OSError as e:
        raise FilesystemError(file_path, e) from e
    return engine.finish().hex()
