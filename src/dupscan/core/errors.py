"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the scanning engine.

- ConfigError: bad patterns, unknown algorithm, invalid parameters (fatal, raised before scanning)
- TraversalError: the root directory cannot be walked (fatal, raised before any work)
- HashError: a single file could not be fully read (recorded per file, never fatal)
"""


class DupScanError(Exception):
    """Base class for all dupscan errors."""


class ConfigError(DupScanError, ValueError):
    """Invalid configuration detected before scanning begins."""


class TraversalError(DupScanError, RuntimeError):
    """The root directory is missing, not a directory, or unreadable."""


class HashError(DupScanError, OSError):
    """A file could not be opened or read to the end while hashing."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to hash {path}: {reason}")
        self.path = path
        self.reason = reason
