"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/matcher.py
Regex matcher to include or exclude file paths.
"""

import re
import logging
from typing import List, Optional, Pattern

from dupscan.core.errors import ConfigError

logger = logging.getLogger(__name__)


class Matcher:
    """
    Accepts a path when it fully matches at least one include pattern (or no
    include patterns are configured) and fully matches none of the exclude patterns.
    Patterns are matched against the whole path string.
    """

    def __init__(self, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None):
        self.include_patterns = list(include or [])
        self.exclude_patterns = list(exclude or [])
        self._include = self._compile(self.include_patterns, "include")
        self._exclude = self._compile(self.exclude_patterns, "exclude")

        if self.include_patterns:
            logger.info(f"Include patterns: {self.include_patterns}")
        if self.exclude_patterns:
            logger.info(f"Exclude patterns: {self.exclude_patterns}")

    @staticmethod
    def _compile(patterns: List[str], kind: str) -> List[Pattern]:
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigError(f"Invalid {kind} pattern '{pattern}': {e}") from e
        return compiled

    def __call__(self, path: str) -> bool:
        if self._include and not any(p.fullmatch(path) for p in self._include):
            return False
        return not any(p.fullmatch(path) for p in self._exclude)

    def __repr__(self):
        return f"<Matcher include={self.include_patterns}, exclude={self.exclude_patterns}>"
