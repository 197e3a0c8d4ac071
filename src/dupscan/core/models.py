"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for lazy size/hash duplicate detection.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, NamedTuple


# =============================
# Enums
# =============================

class BucketState(Enum):
    """
    Lifecycle of a size bucket.
    SINGLETON -> PAIR happens on the first collision (both files get hashed),
    PAIR/GROUP -> GROUP on every later arrival (only the newcomer gets hashed).
    """
    SINGLETON = "singleton"
    PAIR = "pair"
    GROUP = "group"


class SortKey(Enum):
    """Ordering applied to duplicate groups in the final report."""
    PATH = "path"
    SIZE = "size"

    @property
    def display_name(self) -> str:
        mapping = {
            SortKey.PATH: "Path",
            SortKey.SIZE: "Size (largest first)",
        }
        return mapping.get(self, self.value)


# ======================
#  Core Data Models
# ======================

class SourceEntry(NamedTuple):
    """One item produced by a file source before any filtering."""
    path: str
    size: int
    is_regular_file: bool = True
    is_symlink: bool = False


@dataclass
class FileEntry:
    """
    A file admitted to the scan.
    Owned by the SizeIndex arena; `hashed` flips to True once, when its digest is computed.
    """
    path: str
    size: int  # in bytes
    hashed: bool = False

    def __repr__(self):
        return f"<FileEntry path={self.path}, size={self.size}, hashed={self.hashed}>"


@dataclass
class SizeBucket:
    """All handles sharing one file size, in arrival order."""
    size: int
    handles: List[int] = field(default_factory=list)
    state: BucketState = BucketState.SINGLETON

    def __len__(self):
        return len(self.handles)


@dataclass(frozen=True)
class HashFailure:
    """A file that collided on size but could not be hashed."""
    path: str
    size: int
    reason: str


@dataclass
class DuplicateGroup:
    """
    A group of files sharing one content digest.
    Members are kept in discovery order.
    """
    digest: bytes
    size: int
    files: List[FileEntry]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    @property
    def representative(self) -> str:
        """Alphabetically smallest member path, used for path ordering."""
        return min(self.paths)

    @property
    def wasted_bytes(self) -> int:
        """Bytes that would be reclaimed by keeping a single copy."""
        return self.size * (self.duplicate_count - 1)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}, digest={self.digest.hex()[:12]}>"


@dataclass(frozen=True)
class ScanStats:
    """
    Immutable snapshot of the work a scan performed.
    hash_duration is wall-clock seconds spent inside the digester.
    """
    num_files: int = 0
    total_size: int = 0
    num_hashed: int = 0
    total_hashed_size: int = 0
    hash_duration: float = 0.0
    num_failed: int = 0

    @property
    def hash_rate(self) -> float:
        """Bytes hashed per second; 0.0 when nothing was hashed."""
        if self.num_hashed == 0 or self.hash_duration <= 0:
            return 0.0
        return self.total_hashed_size / self.hash_duration

    def to_dict(self) -> dict:
        return {
            "num_files": self.num_files,
            "total_size": self.total_size,
            "num_hashed": self.num_hashed,
            "total_hashed_size": self.total_hashed_size,
            "hash_duration": self.hash_duration,
            "hash_rate": self.hash_rate,
            "num_failed": self.num_failed,
        }


class StatsCollector:
    """
    Mutable accumulator behind ScanStats.
    Counters only grow; snapshot() freezes the current values.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.num_files = 0
        self.total_size = 0
        self.num_hashed = 0
        self.total_hashed_size = 0
        self.hash_duration = 0.0
        self.num_failed = 0

    def record_file(self, size: int) -> None:
        with self._lock:
            self.num_files += 1
            self.total_size += size

    def record_hash(self, size: int, duration: float) -> None:
        with self._lock:
            self.num_hashed += 1
            self.total_hashed_size += size
            self.hash_duration += duration

    def record_failure(self) -> None:
        with self._lock:
            self.num_failed += 1

    def snapshot(self) -> ScanStats:
        with self._lock:
            return ScanStats(
                num_files=self.num_files,
                total_size=self.total_size,
                num_hashed=self.num_hashed,
                total_hashed_size=self.total_hashed_size,
                hash_duration=self.hash_duration,
                num_failed=self.num_failed,
            )


"""
DTO for scan parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""
from dupscan.core.errors import ConfigError


@dataclass
class ScanParams:
    """Parameters for a scan with validation."""
    root_dir: str
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    include_empty: bool = False
    sort_key: SortKey = SortKey.PATH
    algorithm: str = "sha1"
    jobs: int = 1
    verify: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ConfigError("Root directory cannot be empty")

        if self.jobs < 1:
            raise ConfigError(f"Number of jobs must be at least 1, got {self.jobs}")

        if not isinstance(self.sort_key, SortKey):
            try:
                self.sort_key = SortKey(self.sort_key)
            except ValueError:
                raise ConfigError(f"Unknown sort key: '{self.sort_key}'")

        self.algorithm = self.algorithm.strip().lower()
        self.include = [p for p in self.include if p]
        self.exclude = [p for p in self.exclude if p]


@dataclass
class ScanReport:
    """Structured result handed to a renderer."""
    root_dir: str
    groups: List[DuplicateGroup]
    stats: ScanStats
    failures: List[HashFailure] = field(default_factory=list)
    cancelled: bool = False
    skipped_dirs: List[str] = field(default_factory=list)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.groups)

    @property
    def duplicate_files(self) -> int:
        return sum(g.duplicate_count for g in self.groups)

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)

    def find_group(self, path: str) -> Optional[DuplicateGroup]:
        """Return the group containing `path`, if any."""
        for group in self.groups:
            if path in group.paths:
                return group
        return None
