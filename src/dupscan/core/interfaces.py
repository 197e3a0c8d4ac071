"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning engine.
These protocols use structural typing (`typing.Protocol`) so tests and callers
can plug in their own implementations without inheritance.

Key Components:
---------------
- HashAlgorithm: Factory for incremental hash objects (SHA-1, MD5, xxHash, ...).
- FileSource: Anything that yields SourceEntry tuples for a directory tree.
- PathMatcher: Predicate deciding whether a path takes part in the scan.
"""

from typing import Protocol, Iterator

from dupscan.core.models import SourceEntry


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    new() returns a fresh object exposing update(), digest(), digest_size and
    block_size (the hashlib object API).
    """
    name: str

    def new(self):
        ...


class FileSource(Protocol):
    """
    Interface for walking a directory tree.

    Must skip unreadable subtrees without aborting and report symlinks
    through SourceEntry.is_symlink instead of following them.
    """
    def __iter__(self) -> Iterator[SourceEntry]:
        ...


class PathMatcher(Protocol):
    """Include/exclude predicate applied to every candidate path."""
    def __call__(self, path: str) -> bool:
        ...
