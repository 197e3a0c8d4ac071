"""
Shared fixtures for scanning engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict

from dupscan.core.hasher import Digester


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - 3 identical 1KB files (one in a subdirectory)
    - 2 identical 2KB files
    - 1 file with the same size as the 2KB pair but different content
    - 1 file with a unique size (never hashed)
    - 1 empty file (skipped unless empty files are included)
    """
    files = {}

    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.bin"
    files["dup2_b"] = temp_dir / "dup2_b.bin"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Same size as dup2 → hashed, but matches nothing
    files["same_size"] = temp_dir / "same_size.bin"
    files["same_size"].write_bytes(b"C" * 2048)

    # Unique size → never hashed
    files["unique"] = temp_dir / "unique.txt"
    files["unique"].write_bytes(b"D" * 1500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


class CountingDigester(Digester):
    """Digester that remembers every path it was asked to hash."""

    def __init__(self, calls: list):
        super().__init__()
        self.calls = calls

    def digest_file(self, path: str) -> bytes:
        self.calls.append(path)
        return super().digest_file(path)


@pytest.fixture
def hash_calls():
    """List shared by every CountingDigester built through `counting_factory`."""
    return []


@pytest.fixture
def counting_factory(hash_calls):
    return lambda: CountingDigester(hash_calls)
