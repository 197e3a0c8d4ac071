"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/report.py
Turns a finished scan into ordered duplicate groups.

Grouping walks the HashIndex in digest order; every run of 2+ handles sharing a
digest becomes one DuplicateGroup whose members are listed in discovery order.
Groups are then sorted by the requested SortKey, so the output does not depend
on the order in which hashes were computed.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from dupscan.core.indices import HashIndex, SizeIndex
from dupscan.core.models import DuplicateGroup, FileEntry, HashFailure, ScanReport, SortKey

logger = logging.getLogger(__name__)

# Read size for byte-by-byte verification
VERIFY_CHUNK_SIZE = 64 * 1024


class ReportBuilder:
    """
    Builds and sorts duplicate groups.

    With verify=True each hash group is additionally split into sets of
    byte-identical files, removing any chance of a hash collision false positive.
    """

    def __init__(self, sort_key: SortKey = SortKey.PATH, verify: bool = False):
        self.sort_key = sort_key
        self.verify = verify

    def build_groups(
        self,
        size_index: SizeIndex,
        hash_index: HashIndex,
        failures: Optional[List[HashFailure]] = None
    ) -> List[DuplicateGroup]:
        """
        Args:
            size_index: Owner of the entries referenced by hash_index
            hash_index: Digest -> handles produced by the scanner
            failures: Receives files that became unreadable during verification
        Returns:
            Sorted list of groups, each with at least two files
        """
        groups = []
        for digest, handles in hash_index.items():
            if len(handles) < 2:
                continue
            entries = [size_index.entry(h) for h in sorted(handles)]
            group = DuplicateGroup(digest=digest, size=entries[0].size, files=entries)
            if self.verify:
                groups.extend(self._verify_group(group, failures))
            else:
                groups.append(group)

        self.sort_groups(groups, self.sort_key)
        logger.debug(f"Built {len(groups)} duplicate groups (sort={self.sort_key.value}, verify={self.verify})")
        return groups

    def build_report(self, root_dir: str, scan_result) -> ScanReport:
        """Convenience wrapper producing the ScanReport for a ScanResult."""
        failures = list(scan_result.failures)
        groups = self.build_groups(scan_result.size_index, scan_result.hash_index, failures)

        # Files lost during verification count as failed too
        stats = scan_result.stats
        lost = len(failures) - len(scan_result.failures)
        if lost:
            stats = replace(stats, num_failed=stats.num_failed + lost)

        return ScanReport(
            root_dir=root_dir,
            groups=groups,
            stats=stats,
            failures=failures,
            cancelled=scan_result.cancelled,
        )

    @staticmethod
    def sort_groups(groups: List[DuplicateGroup], sort_key: SortKey = SortKey.PATH) -> None:
        """Sort groups in-place."""
        if not groups:
            return
        if sort_key == SortKey.SIZE:
            groups.sort(key=lambda g: (-g.size, g.representative))
        else:
            groups.sort(key=lambda g: g.representative)

    def _verify_group(
        self,
        group: DuplicateGroup,
        failures: Optional[List[HashFailure]]
    ) -> List[DuplicateGroup]:
        """Split a hash group into byte-identical subgroups of 2+ files."""
        subsets: List[List[FileEntry]] = []
        for entry in group.files:
            try:
                # Open first so an unreadable file is blamed on itself, not on a subset head
                with open(entry.path, 'rb'):
                    pass
                for subset in subsets:
                    if self._same_content(subset[0].path, entry.path):
                        subset.append(entry)
                        break
                else:
                    subsets.append([entry])
            except OSError as e:
                logger.warning(f"Could not verify {entry.path}: {e}")
                if failures is not None:
                    failures.append(HashFailure(path=entry.path, size=entry.size, reason=e.strerror or str(e)))

        if len(subsets) > 1:
            logger.warning(f"Hash collision detected for digest {group.digest.hex()}")

        return [
            DuplicateGroup(digest=group.digest, size=group.size, files=subset)
            for subset in subsets
            if len(subset) >= 2
        ]

    @staticmethod
    def _same_content(path_a: str, path_b: str) -> bool:
        with open(path_a, 'rb') as fa, open(path_b, 'rb') as fb:
            while True:
                chunk_a = fa.read(VERIFY_CHUNK_SIZE)
                chunk_b = fb.read(VERIFY_CHUNK_SIZE)
                if chunk_a != chunk_b:
                    return False
                if not chunk_a:
                    return True

