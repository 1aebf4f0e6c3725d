"""Shared pytest fixtures for treehash tests."""

import os
import json
import tempfile
from pathlib import Path

import pytest


# ============================================================================
# Auto-mark tests based on directory
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        test_path = str(item.fspath)

        if '/tests/unit/' in test_path or '\\tests\\unit\\' in test_path:
            item.add_marker(pytest.mark.unit)
        elif '/tests/integration/' in test_path or '\\tests\\integration\\' in test_path:
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Clock Fixtures
# ============================================================================

# 2024-01-01T00:00:00Z
NOW_NS = 1_704_067_200 * 1_000_000_000


class FakeClock:
    """Settable clock returning nanoseconds since the epoch."""

    def __init__(self, now_ns: int = NOW_NS):
        self.now_ns = now_ns

    def __call__(self) -> int:
        return self.now_ns

    def advance(self, seconds: float):
        self.now_ns += int(seconds * 1_000_000_000)


@pytest.fixture
def clock():
    """Fixed clock at NOW_NS."""
    return FakeClock()


# ============================================================================
# File System Fixtures
# ============================================================================

def write_file(path: Path, content: bytes, mtime_ns: int) -> Path:
    """Create a file with the given content and modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


@pytest.fixture
def make_file():
    """Provide write_file for creating files with a fixed mtime."""
    return write_file


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_tree(temp_dir):
    """Small tree whose files were all modified an hour before NOW_NS."""
    root = temp_dir / "tree"
    root.mkdir()
    old = NOW_NS - 3600 * 1_000_000_000

    write_file(root / "a.txt", b"alpha\n", old)
    write_file(root / "b.txt", b"bravo\n", old + 123)
    write_file(root / "docs" / "guide.md", b"# Guide\n", old)
    write_file(root / "docs" / "nested" / "deep.bin", bytes(range(256)) * 8, old)

    yield root


# ============================================================================
# Output Capture Helpers
# ============================================================================

@pytest.fixture
def capture_json_output(capsys):
    """Helper to capture and parse JSON output."""
    def _capture():
        captured = capsys.readouterr()
        try:
            return json.loads(captured.out)
        except json.JSONDecodeError:
            return {"raw": captured.out, "error": "Not valid JSON"}
    return _capture


# ============================================================================
# CLI Runner Fixture
# ============================================================================

@pytest.fixture
def cli_runner():
    """Provide Click's CliRunner for testing CLI commands."""
    from click.testing import CliRunner
    return CliRunner()
