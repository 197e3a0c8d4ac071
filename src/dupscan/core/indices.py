"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/indices.py
The two indices behind lazy duplicate detection.

SizeIndex
    Ordered multimap size -> FileEntry. Entries live in an append-only arena and
    are referenced everywhere else by their integer handle (arena position).
    Each size has a SizeBucket with an explicit SINGLETON/PAIR/GROUP state; the
    SINGLETON -> PAIR transition is the only moment the first file of a size is
    scheduled for hashing.

HashIndex
    Multimap digest -> handles. Holds only entries that were hashed, never owns
    them.
"""

import threading
from bisect import bisect_left
from typing import Dict, Iterator, List, Tuple

from dupscan.core.models import BucketState, FileEntry, SizeBucket


class SizeIndex:

    def __init__(self):
        self._entries: List[FileEntry] = []
        self._sizes: List[int] = []  # sorted bucket keys
        self._buckets: Dict[int, SizeBucket] = {}
        self._paths: Dict[str, int] = {}

    def insert(self, path: str, size: int) -> List[int]:
        """
        Add a file and return the handles that must be hashed as a consequence.

        - new size             -> []                       (SINGLETON, nothing hashed)
        - second file of size  -> [first, new]             (SINGLETON -> PAIR)
        - any later file       -> [new]                    (-> GROUP)
        """
        if path in self._paths:
            raise ValueError(f"Path already indexed: {path}")

        handle = len(self._entries)
        self._entries.append(FileEntry(path=path, size=size))
        self._paths[path] = handle

        pos = bisect_left(self._sizes, size)
        if pos < len(self._sizes) and self._sizes[pos] == size:
            bucket = self._buckets[size]
            bucket.handles.append(handle)
            if bucket.state is BucketState.SINGLETON:
                bucket.state = BucketState.PAIR
                return [bucket.handles[0], handle]
            bucket.state = BucketState.GROUP
            return [handle]

        self._sizes.insert(pos, size)
        self._buckets[size] = SizeBucket(size=size, handles=[handle])
        return []

    def mark_hashed(self, handle: int) -> None:
        entry = self._entries[handle]
        if entry.hashed:
            raise ValueError(f"Entry hashed twice: {entry.path}")
        if self._buckets[entry.size].state is BucketState.SINGLETON:
            raise ValueError(f"Entry has a unique size and must not be hashed: {entry.path}")
        entry.hashed = True

    def entry(self, handle: int) -> FileEntry:
        return self._entries[handle]

    def handle_of(self, path: str) -> int:
        return self._paths[path]

    def bucket(self, size: int) -> SizeBucket:
        return self._buckets[size]

    def buckets(self) -> Iterator[SizeBucket]:
        """Buckets in ascending size order."""
        for size in self._sizes:
            yield self._buckets[size]

    def colliding_buckets(self) -> List[SizeBucket]:
        """Buckets holding two or more files, i.e. everything that needs hashing."""
        return [b for b in self.buckets() if b.state is not BucketState.SINGLETON]

    def entries(self) -> Iterator[Tuple[int, FileEntry]]:
        """(handle, entry) pairs ordered by size, then arrival."""
        for bucket in self.buckets():
            for handle in bucket.handles:
                yield handle, self._entries[handle]

    def __len__(self):
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return path in self._paths

    def __repr__(self):
        return f"<SizeIndex files={len(self._entries)}, sizes={len(self._sizes)}>"


class HashIndex:
    """Thread-safe digest -> handles multimap."""

    def __init__(self):
        self._lock = threading.Lock()
        self._groups: Dict[bytes, List[int]] = {}
        self._count = 0

    def add(self, digest: bytes, handle: int) -> None:
        with self._lock:
            self._groups.setdefault(digest, []).append(handle)
            self._count += 1

    def items(self) -> List[Tuple[bytes, List[int]]]:
        """(digest, handles) runs in ascending digest order; each handle list is a copy."""
        with self._lock:
            return [(digest, list(self._groups[digest])) for digest in sorted(self._groups)]

    def __len__(self):
        return self._count

    def __contains__(self, digest: bytes) -> bool:
        with self._lock:
            return digest in self._groups

    def __repr__(self):
        return f"<HashIndex files={self._count}, digests={len(self._groups)}>"
