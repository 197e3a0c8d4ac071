"""
Core scanning engine — digester, size/hash indices, scanner, and report builder.

This package contains the performance-critical foundation of dupscan:
- Digester: streaming SHA-1 (or MD5/SHA-256/xxHash64) content hashing
- SizeIndex / HashIndex: lazy size bucketing and digest grouping
- Scanner: hashes a file only once another file with the same size shows up
- ReportBuilder: groups, optionally verifies, and sorts duplicates
- FileSourceImpl / Matcher: directory walking and regex path filtering

All components are pure Python with no console output — suitable for CLI and library usage.
"""

from .errors import DupScanError, ConfigError, TraversalError, HashError
from .hasher import Digester, get_algorithm, ALGORITHMS, DEFAULT_ALGORITHM
from .indices import SizeIndex, HashIndex
from .matcher import Matcher
from .source import FileSourceImpl
from .scanner import Scanner, ScanResult
from .report import ReportBuilder
from .models import (
    BucketState, SortKey, SourceEntry, FileEntry, SizeBucket, HashFailure,
    DuplicateGroup, ScanStats, StatsCollector, ScanParams, ScanReport)

__all__ = [
    "DupScanError",
    "ConfigError",
    "TraversalError",
    "HashError",
    "Digester",
    "get_algorithm",
    "ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "SizeIndex",
    "HashIndex",
    "Matcher",
    "FileSourceImpl",
    "Scanner",
    "ScanResult",
    "ReportBuilder",
    "BucketState",
    "SortKey",
    "SourceEntry",
    "FileEntry",
    "SizeBucket",
    "HashFailure",
    "DuplicateGroup",
    "ScanStats",
    "StatsCollector",
    "ScanParams",
    "ScanReport",
]
