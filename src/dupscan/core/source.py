"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/source.py
Recursive directory walker producing SourceEntry tuples.
Features:
- Uses os.walk for fast traversal (symlinked directories are never followed)
- Skips unreadable subdirectories instead of aborting the walk
- Reports symlinks and special files so the scanner can discard them
- Fails fast with TraversalError when the root itself is unusable
"""

import os
import stat
import logging
from typing import Iterator, List

from dupscan.core.errors import TraversalError
from dupscan.core.interfaces import FileSource
from dupscan.core.models import SourceEntry

logger = logging.getLogger(__name__)


class FileSourceImpl(FileSource):
    """
    Walks root_dir recursively and yields one SourceEntry per directory entry
    that is not a directory.

    Attributes:
        root_dir: Root directory to walk
        skipped_dirs: Subdirectories that could not be read (filled while iterating)
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        self.skipped_dirs: List[str] = []

    def validate_root(self) -> None:
        """
        Raises:
            TraversalError: If the root is missing, not a directory, or unreadable
        """
        if not os.path.exists(self.root_dir):
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise TraversalError(error_msg)
        if not os.path.isdir(self.root_dir):
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise TraversalError(error_msg)
        if not os.access(self.root_dir, os.R_OK | os.X_OK):
            error_msg = f"Directory is not readable: {self.root_dir}"
            logger.error(error_msg)
            raise TraversalError(error_msg)

    def __iter__(self) -> Iterator[SourceEntry]:
        self.validate_root()
        self.skipped_dirs = []
        root = os.path.normpath(self.root_dir)
        logger.debug(f"Walking directory: {root}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            # Pre-filter subdirectories BEFORE os.walk enters them
            dirnames[:] = [d for d in dirnames if self._prefilter_dir(os.path.join(dirpath, d))]

            for filename in filenames:
                entry = self._process_file(os.path.join(dirpath, filename))
                if entry is not None:
                    yield entry

    def _on_walk_error(self, error: OSError) -> None:
        if os.path.normpath(error.filename or "") == os.path.normpath(self.root_dir):
            raise TraversalError(f"Cannot read root directory {self.root_dir}: {error}") from error
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")
        self.skipped_dirs.append(error.filename)

    def _prefilter_dir(self, path: str) -> bool:
        """Skip symlinked and inaccessible directories."""
        try:
            if os.path.islink(path):
                logger.debug(f"Not following directory symlink: {path}")
                return False
            if not os.access(path, os.R_OK | os.X_OK):
                logger.warning(f"Skipping inaccessible directory: {path}")
                self.skipped_dirs.append(path)
                return False
            return True
        except OSError as e:
            logger.debug(f"Skipping directory {path}: {e}")
            self.skipped_dirs.append(path)
            return False

    @staticmethod
    def _process_file(path: str):
        """Stat one path without following symlinks; None if it vanished or cannot be stat'ed."""
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        if stat.S_ISLNK(st.st_mode):
            return SourceEntry(path=path, size=st.st_size, is_regular_file=False, is_symlink=True)

        return SourceEntry(
            path=path,
            size=st.st_size,
            is_regular_file=stat.S_ISREG(st.st_mode),
            is_symlink=False,
        )
