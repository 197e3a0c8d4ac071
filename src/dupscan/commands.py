"""
Unified command orchestrator for duplicate scanning.
This is the SINGLE source of truth for the workflow — used by the CLI and by library callers.
"""
import os
from typing import Callable, Iterable, Optional

from dupscan.core.matcher import Matcher
from dupscan.core.models import ScanParams, ScanReport, SourceEntry
from dupscan.core.report import ReportBuilder
from dupscan.core.scanner import Scanner, ScanResult
from dupscan.core.source import FileSourceImpl


class ScanCommand:
    """
    Orchestrates the entire workflow:
    1. Compile include/exclude patterns (ConfigError on bad input)
    2. Validate the root directory (TraversalError if unusable)
    3. Walk, bucket by size, hash on collision
    4. Build, verify (optionally) and sort the duplicate groups

    Usage:
        params = ScanParams(root_dir="~/Backups", sort_key=SortKey.SIZE)
        report = ScanCommand().execute(params, progress_callback=printer)
    """

    def __init__(self):
        self._last_result: Optional[ScanResult] = None

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            source: Optional[Iterable[SourceEntry]] = None
    ) -> ScanReport:
        """
        Run a scan with the given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)
            source: Replaces the directory walker (e.g. a pre-built file list)

        Returns:
            ScanReport with sorted duplicate groups, stats, hash failures and skipped directories

        Raises:
            ConfigError: If patterns or parameters are invalid
            TraversalError: If the root directory cannot be walked
        """
        root_dir = os.path.abspath(os.path.expanduser(params.root_dir))
        matcher = Matcher(include=params.include, exclude=params.exclude)
        scanner = Scanner(
            matcher=matcher,
            include_empty=params.include_empty,
            algorithm=params.algorithm,
            jobs=params.jobs,
        )

        file_source = None
        if source is None:
            file_source = FileSourceImpl(root_dir)
            file_source.validate_root()
            source = file_source

        result = scanner.scan(source, stopped_flag=stopped_flag, progress_callback=progress_callback)
        self._last_result = result

        builder = ReportBuilder(sort_key=params.sort_key, verify=params.verify)
        report = builder.build_report(root_dir, result)
        if file_source is not None:
            report.skipped_dirs = list(file_source.skipped_dirs)
        return report

    def get_last_result(self) -> Optional[ScanResult]:
        """Raw indices of the most recent execution."""
        return self._last_result
