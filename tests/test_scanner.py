"""
Unit tests for Scanner.
Verifies lazy hashing, filtering, failure isolation and sequential/concurrent equivalence.
"""
import os

import pytest

from dupscan.core.errors import ConfigError
from dupscan.core.matcher import Matcher
from dupscan.core.models import SourceEntry
from dupscan.core.report import ReportBuilder
from dupscan.core.scanner import Scanner
from dupscan.core.source import FileSourceImpl


def make_source(tmp_path, files):
    """Write {name: content} files and return a SourceEntry list in that order."""
    entries = []
    for name, content in files:
        path = tmp_path / name
        path.write_bytes(content)
        entries.append(SourceEntry(path=str(path), size=len(content)))
    return entries


class TestLazyHashing:
    """Test that only size-colliding files are ever read."""

    def test_no_hashing_when_all_sizes_unique(self, tmp_path, hash_calls, counting_factory):
        """Files of sizes 5, 6, 7 must never be opened."""
        source = make_source(tmp_path, [("a", b"x" * 5), ("b", b"x" * 6), ("c", b"x" * 7)])

        result = Scanner(digester_factory=counting_factory).scan(source)

        assert hash_calls == []
        assert result.stats.num_files == 3
        assert result.stats.num_hashed == 0
        assert result.stats.hash_rate == 0.0
        assert len(result.hash_index) == 0

    def test_reference_scenario(self, tmp_path, hash_calls, counting_factory):
        """
        A(10,"x"), B(10,"x"), C(10,"y"), D(20):
        A, B and C are hashed once each, D never; only {A, B} is a group.
        """
        source = make_source(tmp_path, [
            ("A", b"x" * 10),
            ("B", b"x" * 10),
            ("C", b"y" * 10),
            ("D", b"z" * 20),
        ])
        paths = {name: str(tmp_path / name) for name in "ABCD"}

        result = Scanner(digester_factory=counting_factory).scan(source)
        groups = ReportBuilder().build_groups(result.size_index, result.hash_index)

        assert sorted(hash_calls) == sorted([paths["A"], paths["B"], paths["C"]])
        assert paths["D"] not in hash_calls
        assert len(groups) == 1
        assert groups[0].paths == [paths["A"], paths["B"]]
        assert result.size_index.entry(result.size_index.handle_of(paths["C"])).hashed
        assert not result.size_index.entry(result.size_index.handle_of(paths["D"])).hashed

    def test_each_colliding_file_hashed_exactly_once(self, tmp_path, hash_calls, counting_factory):
        """However many files share a size, each is hashed exactly once."""
        source = make_source(tmp_path, [(f"f{i}", b"%02d" % i + b"-" * 8) for i in range(6)])

        result = Scanner(digester_factory=counting_factory).scan(source)

        assert len(hash_calls) == 6
        assert len(set(hash_calls)) == 6
        assert result.stats.num_hashed == 6
        assert result.stats.total_hashed_size == 60

    def test_hashed_flag_matches_hash_index(self, test_files):
        """An entry is in the HashIndex iff its hashed flag is set."""
        root = str(test_files["dup1_a"].parent)
        result = Scanner().scan(FileSourceImpl(root))

        indexed = {h for _, handles in result.hash_index.items() for h in handles}
        for handle, entry in result.size_index.entries():
            assert entry.hashed == (handle in indexed)


class TestFiltering:
    """Test candidate admission before the collision protocol."""

    def test_symlinks_and_special_files_skipped(self, tmp_path, hash_calls, counting_factory):
        source = make_source(tmp_path, [("real", b"abc")])
        source.append(SourceEntry(path=str(tmp_path / "link"), size=3, is_regular_file=False, is_symlink=True))
        source.append(SourceEntry(path=str(tmp_path / "fifo"), size=3, is_regular_file=False))

        result = Scanner(digester_factory=counting_factory).scan(source)

        assert len(result.size_index) == 1
        assert hash_calls == []

    def test_empty_files_skipped_by_default(self, tmp_path, hash_calls, counting_factory):
        """With the policy disabled, zero-byte files never enter the scan."""
        source = make_source(tmp_path, [("e1", b""), ("e2", b""), ("e3", b"")])

        result = Scanner(digester_factory=counting_factory).scan(source)
        groups = ReportBuilder().build_groups(result.size_index, result.hash_index)

        assert len(result.size_index) == 0
        assert result.stats.num_files == 0
        assert hash_calls == []
        assert groups == []

    def test_empty_files_grouped_when_included(self, tmp_path):
        source = make_source(tmp_path, [("e1", b""), ("e2", b"")])

        result = Scanner(include_empty=True).scan(source)
        groups = ReportBuilder().build_groups(result.size_index, result.hash_index)

        assert len(groups) == 1
        assert groups[0].size == 0

    def test_matcher_applied(self, tmp_path, hash_calls, counting_factory):
        """Excluded paths are not counted and cannot trigger collisions."""
        source = make_source(tmp_path, [("keep.txt", b"same"), ("drop.log", b"same")])
        matcher = Matcher(exclude=[r".*\.log"])

        result = Scanner(matcher=matcher, digester_factory=counting_factory).scan(source)

        assert len(result.size_index) == 1
        assert result.stats.num_files == 1
        assert hash_calls == []

    def test_path_reported_twice_counted_once(self, tmp_path):
        source = make_source(tmp_path, [("a", b"123")])
        source = source + source

        result = Scanner().scan(source)

        assert len(result.size_index) == 1
        assert result.stats.num_files == 1

    def test_stats_count_considered_bytes(self, tmp_path):
        source = make_source(tmp_path, [("a", b"1" * 10), ("b", b"2" * 20)])
        stats = Scanner().scan(source).stats
        assert stats.num_files == 2
        assert stats.total_size == 30


class TestFailureIsolation:
    """Test that unreadable files are recorded, not fatal."""

    def test_vanished_file_reported_and_scan_continues(self, tmp_path):
        """A file deleted between stat and read becomes a HashFailure."""
        source = make_source(tmp_path, [
            ("a", b"q" * 10),
            ("b", b"q" * 10),
            ("c", b"q" * 10),
            ("x", b"w" * 30),
            ("y", b"w" * 30),
        ])
        os.remove(tmp_path / "b")

        result = Scanner().scan(source)
        groups = ReportBuilder().build_groups(result.size_index, result.hash_index)

        assert [f.path for f in result.failures] == [str(tmp_path / "b")]
        assert result.stats.num_failed == 1
        assert result.stats.num_hashed == 4
        assert len(groups) == 2
        assert all(str(tmp_path / "b") not in g.paths for g in groups)
        assert not result.size_index.entry(1).hashed

    def test_failed_first_entry_not_retried(self, tmp_path, hash_calls, counting_factory):
        """If the first file of a size fails, later arrivals must not re-read it."""
        source = [SourceEntry(path=str(tmp_path / "missing"), size=4)]
        source += make_source(tmp_path, [("b", b"abcd"), ("c", b"abcd")])

        result = Scanner(digester_factory=counting_factory).scan(source)

        assert hash_calls.count(str(tmp_path / "missing")) == 1
        assert len(result.failures) == 1
        assert result.stats.num_hashed == 2


class TestCancellation:
    """Test stopped_flag and progress reporting."""

    def test_stopped_flag_interrupts_scan(self, tmp_path):
        source = make_source(tmp_path, [(f"f{i}", b"x" * i) for i in range(1, 6)])
        seen = []

        def stopped_flag():
            seen.append(1)
            return len(seen) > 2

        result = Scanner().scan(source, stopped_flag=stopped_flag)

        assert result.cancelled
        assert len(result.size_index) == 2

    def test_progress_callback_receives_final_count(self, tmp_path):
        source = make_source(tmp_path, [("a", b"1"), ("b", b"22")])
        calls = []

        Scanner().scan(source, progress_callback=lambda stage, cur, total: calls.append((stage, cur, total)))

        assert calls[-1] == ("scanning", 2, None)


class TestConcurrentScanning:
    """Test the thread-pool mode against the sequential mode."""

    def test_concurrent_matches_sequential(self, test_files):
        root = str(test_files["dup1_a"].parent)

        sequential = Scanner(jobs=1).scan(FileSourceImpl(root))
        concurrent = Scanner(jobs=4).scan(FileSourceImpl(root))

        builder = ReportBuilder()
        seq_groups = builder.build_groups(sequential.size_index, sequential.hash_index)
        con_groups = builder.build_groups(concurrent.size_index, concurrent.hash_index)

        assert [g.paths for g in seq_groups] == [g.paths for g in con_groups]
        assert sequential.stats.num_hashed == concurrent.stats.num_hashed

    def test_concurrent_hashes_each_colliding_file_once(self, tmp_path, hash_calls, counting_factory):
        source = make_source(tmp_path, [
            ("a", b"1" * 8), ("b", b"1" * 8), ("c", b"2" * 8),
            ("d", b"3" * 16), ("e", b"3" * 16),
            ("f", b"4" * 32),
        ])

        result = Scanner(jobs=3, digester_factory=counting_factory).scan(source)

        assert sorted(hash_calls) == sorted(str(tmp_path / n) for n in "abcde")
        assert result.stats.num_hashed == 5

    def test_concurrent_failure_does_not_abort_siblings(self, tmp_path):
        source = make_source(tmp_path, [("a", b"1" * 8), ("b", b"1" * 8), ("c", b"2" * 16), ("d", b"2" * 16)])
        os.remove(tmp_path / "a")

        result = Scanner(jobs=2).scan(source)
        groups = ReportBuilder().build_groups(result.size_index, result.hash_index)

        assert [f.path for f in result.failures] == [str(tmp_path / "a")]
        assert [g.paths for g in groups] == [[str(tmp_path / "c"), str(tmp_path / "d")]]

    def test_invalid_job_count(self):
        with pytest.raises(ConfigError):
            Scanner(jobs=0)
