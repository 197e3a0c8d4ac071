"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Drives a file source through the SizeIndex / HashIndex pair.

SEQUENTIAL MODE (jobs == 1)
---------------------------
Every accepted file is inserted into the SizeIndex. The index answers which
handles must be hashed right now (both files on the first collision of a size,
only the newcomer afterwards) and the scanner hashes them inline.

CONCURRENT MODE (jobs > 1)
--------------------------
Traversal and size bucketing stay single-threaded. Once the tree is walked,
every bucket with 2+ files becomes one task on a thread pool; each task owns
its own Digester. Results are merged into the HashIndex by the calling thread
as tasks complete.

Both modes hash exactly the members of colliding size buckets, each once.
A file that cannot be read is recorded as a HashFailure and the scan goes on.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from dupscan.core.errors import ConfigError, HashError
from dupscan.core.hasher import Digester, get_algorithm, DEFAULT_ALGORITHM
from dupscan.core.indices import HashIndex, SizeIndex
from dupscan.core.interfaces import PathMatcher
from dupscan.core.models import HashFailure, ScanStats, SizeBucket, SourceEntry, StatsCollector

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]


@dataclass
class ScanResult:
    """Both indices plus what it cost to build them."""
    size_index: SizeIndex
    hash_index: HashIndex
    stats: ScanStats
    failures: List[HashFailure] = field(default_factory=list)
    cancelled: bool = False


class HashOutcome(NamedTuple):
    handle: int
    digest: Optional[bytes]
    duration: float
    error: Optional[str]


class Scanner:
    """
    Lazy duplicate scanner.

    Attributes:
        matcher: Path predicate; every path passes when None
        include_empty: Keep zero-byte files (they are skipped by default)
        jobs: Number of hashing threads (1 = hash inline while walking)
        digester_factory: Builds a Digester; one is created per worker
    """

    # Report scanning progress every N accepted files
    PROGRESS_INTERVAL = 1000

    def __init__(
        self,
        matcher: Optional[PathMatcher] = None,
        include_empty: bool = False,
        algorithm: str = DEFAULT_ALGORITHM,
        jobs: int = 1,
        digester_factory: Optional[Callable[[], Digester]] = None
    ):
        if jobs < 1:
            raise ConfigError(f"Number of jobs must be at least 1, got {jobs}")
        self.matcher = matcher
        self.include_empty = include_empty
        self.jobs = jobs
        if digester_factory is None:
            hash_algorithm = get_algorithm(algorithm)
            digester_factory = lambda: Digester(hash_algorithm)
        self.digester_factory = digester_factory

    def scan(
        self,
        source: Iterable[SourceEntry],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> ScanResult:
        """
        Consume the whole source and return the populated indices.
        Stops early (result.cancelled = True) when stopped_flag() returns True.
        """
        size_index = SizeIndex()
        hash_index = HashIndex()
        collector = StatsCollector()
        failures: List[HashFailure] = []
        cancelled = False
        digester = self.digester_factory() if self.jobs == 1 else None

        logger.debug(f"Starting scan (jobs={self.jobs}, include_empty={self.include_empty})")
        start_time = time.perf_counter()

        for item in source:
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                cancelled = True
                break

            if not self._accepts(item):
                continue

            try:
                to_hash = size_index.insert(item.path, item.size)
            except ValueError:
                logger.debug(f"Skipping path reported twice: {item.path}")
                continue
            collector.record_file(item.size)

            if digester is not None:
                for handle in to_hash:
                    outcome = self._hash_handle(digester, size_index, handle)
                    self._merge(outcome, size_index, hash_index, collector, failures)

            if progress_callback and collector.num_files % self.PROGRESS_INTERVAL == 0:
                progress_callback("scanning", collector.num_files, None)

        if progress_callback:
            progress_callback("scanning", collector.num_files, None)

        if self.jobs > 1 and not cancelled:
            cancelled = self._hash_concurrently(
                size_index, hash_index, collector, failures, stopped_flag, progress_callback
            )

        stats = collector.snapshot()
        logger.debug(
            f"Scan finished in {time.perf_counter() - start_time:.2f}s: "
            f"{stats.num_files} files, {stats.num_hashed} hashed, {stats.num_failed} failed"
        )
        return ScanResult(
            size_index=size_index,
            hash_index=hash_index,
            stats=stats,
            failures=failures,
            cancelled=cancelled,
        )

    def _accepts(self, item: SourceEntry) -> bool:
        if item.is_symlink or not item.is_regular_file:
            logger.debug(f"Skipping non-regular file: {item.path}")
            return False
        if item.size == 0 and not self.include_empty:
            logger.debug(f"Skipping zero-byte file: {item.path}")
            return False
        if self.matcher is not None and not self.matcher(item.path):
            logger.debug(f"Skipping {item.path} (filtered by patterns)")
            return False
        return True

    @staticmethod
    def _hash_handle(digester: Digester, size_index: SizeIndex, handle: int) -> HashOutcome:
        entry = size_index.entry(handle)
        return Scanner._hash_path(digester, handle, entry.path)

    @staticmethod
    def _hash_path(digester: Digester, handle: int, path: str) -> HashOutcome:
        t0 = time.perf_counter()
        try:
            digest = digester.digest_file(path)
        except HashError as e:
            return HashOutcome(handle, None, time.perf_counter() - t0, e.reason)
        return HashOutcome(handle, digest, time.perf_counter() - t0, None)

    @staticmethod
    def _merge(
        outcome: HashOutcome,
        size_index: SizeIndex,
        hash_index: HashIndex,
        collector: StatsCollector,
        failures: List[HashFailure]
    ) -> None:
        entry = size_index.entry(outcome.handle)
        if outcome.error is not None:
            logger.warning(f"Could not hash {entry.path}: {outcome.error}")
            failures.append(HashFailure(path=entry.path, size=entry.size, reason=outcome.error))
            collector.record_failure()
            return
        size_index.mark_hashed(outcome.handle)
        hash_index.add(outcome.digest, outcome.handle)
        collector.record_hash(entry.size, outcome.duration)

    def _hash_bucket(self, members: List[Tuple[int, str]]) -> List[HashOutcome]:
        """Worker task: hash every member of one size bucket with a private digester."""
        digester = self.digester_factory()
        return [self._hash_path(digester, handle, path) for handle, path in members]

    def _hash_concurrently(
        self,
        size_index: SizeIndex,
        hash_index: HashIndex,
        collector: StatsCollector,
        failures: List[HashFailure],
        stopped_flag: Optional[Callable[[], bool]],
        progress_callback: Optional[ProgressCallback]
    ) -> bool:
        """Fan out one task per colliding bucket. Returns True if cancelled."""
        buckets: List[SizeBucket] = size_index.colliding_buckets()
        total = sum(len(b) for b in buckets)
        done = 0
        logger.debug(f"Hashing {total} files in {len(buckets)} size buckets with {self.jobs} workers")

        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            futures = [
                executor.submit(
                    self._hash_bucket,
                    [(h, size_index.entry(h).path) for h in bucket.handles]
                )
                for bucket in buckets
            ]
            for future in as_completed(futures):
                if stopped_flag and stopped_flag():
                    logger.debug("Hashing interrupted by user")
                    for pending in futures:
                        pending.cancel()
                    return True

                for outcome in future.result():
                    self._merge(outcome, size_index, hash_index, collector, failures)
                done += 1
                if progress_callback:
                    progress_callback("hashing", done, len(buckets))

        return False
