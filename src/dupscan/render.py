"""
Presentation layer for scan reports.
The core only returns ScanReport objects; everything printed lives here.
"""
import json
from typing import List

from dupscan.core.models import ScanReport, ScanStats
from dupscan.utils.convert_utils import ConvertUtils

NO_DUPLICATES_MESSAGE = "No duplicate files."

# Number of failed files or skipped directories listed in text output before truncating
MAX_FAILURES_SHOWN = 10


def format_stats(stats: ScanStats) -> str:
    """Two-line summary of scanned and hashed volume."""
    return (
        f"Scanned {stats.num_files} files, totalling "
        f"{ConvertUtils.bytes_to_human_detailed(stats.total_size)} in size.\n"
        f"Hashed {stats.num_hashed} files, totalling "
        f"{ConvertUtils.bytes_to_human_detailed(stats.total_hashed_size)} in size, "
        f"at an average rate of {ConvertUtils.rate_to_human(stats.hash_rate)}."
    )


class TextRenderer:
    """Human-readable report."""

    def __init__(self, show_stats: bool = True):
        self.show_stats = show_stats

    def render(self, report: ScanReport) -> str:
        lines: List[str] = []

        if report.cancelled:
            lines.append("⚠️  Scan was cancelled, results are incomplete.")

        if not report.has_duplicates:
            lines.append(NO_DUPLICATES_MESSAGE)
        else:
            lines.append(
                f"Found {len(report.groups)} duplicate groups ({report.duplicate_files} files, "
                f"{ConvertUtils.bytes_to_human(report.wasted_bytes)} reclaimable)"
            )
            for idx, group in enumerate(report.groups, 1):
                size_str = ConvertUtils.bytes_to_human(group.size)
                lines.append("")
                lines.append(f"📁 Group {idx} | Size: {size_str} | Files: {group.duplicate_count}")
                for path in group.paths:
                    lines.append(f"   {path}")

        if report.failures:
            lines.append("")
            lines.append(f"⚠️  {len(report.failures)} file(s) could not be hashed:")
            for failure in report.failures[:MAX_FAILURES_SHOWN]:
                lines.append(f"   {failure.path}: {failure.reason}")
            if len(report.failures) > MAX_FAILURES_SHOWN:
                lines.append(f"   ...and {len(report.failures) - MAX_FAILURES_SHOWN} more files")

        if report.skipped_dirs:
            lines.append("")
            lines.append(f"⚠️  {len(report.skipped_dirs)} director(ies) could not be read:")
            for path in report.skipped_dirs[:MAX_FAILURES_SHOWN]:
                lines.append(f"   {path}")
            if len(report.skipped_dirs) > MAX_FAILURES_SHOWN:
                lines.append(f"   ...and {len(report.skipped_dirs) - MAX_FAILURES_SHOWN} more directories")

        if self.show_stats:
            lines.append("")
            lines.append(format_stats(report.stats))

        return "\n".join(lines)


class JsonRenderer:
    """Machine-readable report."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_dict(self, report: ScanReport) -> dict:
        return {
            "root_dir": report.root_dir,
            "duplicates_found": report.has_duplicates,
            "message": None if report.has_duplicates else NO_DUPLICATES_MESSAGE,
            "cancelled": report.cancelled,
            "groups": [
                {
                    "digest": group.digest.hex(),
                    "size": group.size,
                    "files": group.paths,
                }
                for group in report.groups
            ],
            "failures": [
                {"path": f.path, "size": f.size, "reason": f.reason}
                for f in report.failures
            ],
            "skipped_dirs": list(report.skipped_dirs),
            "stats": report.stats.to_dict(),
        }

    def render(self, report: ScanReport) -> str:
        return json.dumps(self.to_dict(report), indent=self.indent, ensure_ascii=False)
