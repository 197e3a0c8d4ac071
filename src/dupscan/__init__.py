"""
dupscan — content-based duplicate file finder for backup and storage hygiene.

Core features:
- Lazy hashing: a file is only read once another file with the same size appears
- Streaming SHA-1 digests by default (MD5, SHA-256 and xxHash64 selectable)
- Optional byte-by-byte verification of hash matches
- Optional multi-threaded hashing of size buckets
- Report-only: groups are returned, nothing is ever deleted
"""

# Get version
from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupscan")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

# Public API: only what users should import directly
from dupscan.commands import ScanCommand
from dupscan.core import (
    ScanParams, ScanReport, SortKey, DuplicateGroup, FileEntry, HashFailure, ScanStats,
    ConfigError, TraversalError, HashError)
from dupscan.render import TextRenderer, JsonRenderer
from dupscan.utils.convert_utils import ConvertUtils

__all__ = [
    "ScanCommand",
    "ScanParams",
    "ScanReport",
    "SortKey",
    "DuplicateGroup",
    "FileEntry",
    "HashFailure",
    "ScanStats",
    "ConfigError",
    "TraversalError",
    "HashError",
    "TextRenderer",
    "JsonRenderer",
    "ConvertUtils",
    "__version__",
]
