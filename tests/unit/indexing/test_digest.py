"""Tests for the SHA-1 digest engines."""

import hashlib

import pytest

from treehash.errors import FilesystemError
from treehash.indexing.digest import (
    HEX_DIGEST_LENGTH,
    HashlibSha1Digest,
    Sha1Digest,
    file_digest,
    new_digest,
)


KNOWN_VECTORS = [
    (b"", "da39a3ee5e6b4b0d3255bfef95601890afd80709"),
    (b"abc", "a9993e364706816aba3e25717850c26c9cd0d89d"),
    (
        b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
        "84983e441c3bd26ebaae4aa1f95129e5e54670f1",
    ),
    (
        b"The quick brown fox jumps over the lazy dog",
        "2fd4e1c67a2d28fced849ee1bb76e7391b93eb12",
    ),
]


def digest_hex(data: bytes, backend: str) -> str:
    engine = new_digest(backend)
    engine.start()
    engine.process(data)
    return engine.finish().hex()


class TestSha1Digest:
    """Tests for the pure Python engine."""

    @pytest.mark.parametrize("data,expected", KNOWN_VECTORS)
    def test_known_vectors(self, data, expected):
        assert digest_hex(data, backend="python") == expected

    def test_million_a(self):
        """NIST long message vector, fed in uneven chunks."""
        d = Sha1Digest()
        d.start()
        remaining = 1_000_000
        while remaining:
            n = min(remaining, 9973)
            d.process(b"a" * n)
            remaining -= n
        assert d.finish().hex() == "34aa973cd4c4daa4f61eeb2bdbad27316534016f"

    def test_streaming_matches_single_call(self):
        """Chunk boundaries do not affect the result."""
        data = bytes(range(256)) * 5 + b"tail"
        expected = hashlib.sha1(data).hexdigest()

        for split in (1, 3, 55, 56, 63, 64, 65, 127, 500):
            d = Sha1Digest()
            d.start()
            for i in range(0, len(data), split):
                d.process(data[i:i + split])
            assert d.finish().hex() == expected, f"split={split}"

    @pytest.mark.parametrize("length", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128])
    def test_padding_boundaries(self, length):
        """Lengths around the 56-byte padding limit match hashlib."""
        data = b"x" * length
        assert digest_hex(data, backend="python") == hashlib.sha1(data).hexdigest()

    def test_accepts_memoryview_and_bytearray(self):
        d = Sha1Digest()
        d.start()
        d.process(bytearray(b"ab"))
        d.process(memoryview(b"c"))
        assert d.finish().hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_finish_returns_20_bytes(self):
        d = Sha1Digest()
        d.start()
        assert len(d.finish()) == 20

    def test_reuse_after_finish_requires_start(self):
        d = Sha1Digest()
        d.start()
        d.process(b"abc")
        d.finish()

        with pytest.raises(RuntimeError):
            d.process(b"more")
        with pytest.raises(RuntimeError):
            d.finish()

        d.start()
        d.process(b"abc")
        assert d.finish().hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_process_before_start_raises(self):
        with pytest.raises(RuntimeError):
            Sha1Digest().process(b"abc")


class TestBackends:
    """Tests for backend selection."""

    def test_new_digest_backends(self):
        assert isinstance(new_digest("python"), Sha1Digest)
        assert isinstance(new_digest("hashlib"), HashlibSha1Digest)
        assert isinstance(new_digest(), HashlibSha1Digest)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown digest backend"):
            new_digest("md5")

    @pytest.mark.parametrize("data,expected", KNOWN_VECTORS)
    def test_hashlib_backend_vectors(self, data, expected):
        assert digest_hex(data, backend="hashlib") == expected


class TestFileDigest:
    """Tests for streaming a file through an engine."""

    @pytest.mark.parametrize("backend", ["hashlib", "python"])
    def test_file_digest(self, temp_dir, backend):
        data = bytes(range(256)) * 40
        path = temp_dir / "data.bin"
        path.write_bytes(data)

        result = file_digest(path, backend=backend, chunk_size=1000)

        assert result == hashlib.sha1(data).hexdigest()
        assert len(result) == HEX_DIGEST_LENGTH

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty"
        path.touch()
        assert file_digest(path) == "da39a3ee5e6b4b0d3255bfef95601890afd80709"

    def test_missing_file_raises_filesystem_error(self, temp_dir):
        with pytest.raises(FilesystemError) as exc_info:
            file_digest(temp_dir / "missing")
        assert "missing" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, FileNotFoundError)
