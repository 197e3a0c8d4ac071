#!/usr/bin/env python3
"""
dupscan CLI — Command line interface for content-based duplicate file detection.
Reports groups of byte-identical files; it never deletes or moves anything.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from typing import List, Optional, NoReturn

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

logging.basicConfig(
    level=logging.WARNING,
    format=LOG_FORMAT
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupscan.aliases import (
    SORT_ALIASES, SORT_CHOICES, SORT_HELP_TEXT,
    ALGORITHM_HELP_TEXT, EPILOG_TEXT
)
from dupscan.commands import ScanCommand
from dupscan.core.errors import ConfigError, TraversalError
from dupscan.core.hasher import ALGORITHMS, DEFAULT_ALGORITHM
from dupscan.core.models import ScanParams, ScanReport, SortKey
from dupscan.render import JsonRenderer, TextRenderer


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: int = 0
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError.
        # Undecodable filename bytes arrive as surrogates and are printed escaped.
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8', errors='backslashreplace')

    @staticmethod
    def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupscan",
            description="dupscan — find duplicate files by content, hashing only files whose size collides",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "directory",
            nargs="?",
            default=".",
            help="Directory to scan (default: current directory)"
        )

        # Filtering options
        parser.add_argument(
            "--include", "-i",
            action="append",
            default=[],
            metavar="REGEX",
            help="Only consider paths fully matching this regex (repeatable)"
        )
        parser.add_argument(
            "--exclude", "-e",
            action="append",
            default=[],
            metavar="REGEX",
            help="Ignore paths fully matching this regex (repeatable)"
        )
        parser.add_argument(
            "--include-empty",
            action="store_true",
            help="Also report zero-byte files as duplicates of each other"
        )

        # Engine options
        parser.add_argument(
            "--algorithm", "-a",
            choices=sorted(ALGORITHMS),
            default=DEFAULT_ALGORITHM,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--jobs", "-j",
            type=int,
            default=1,
            metavar="N",
            help="Number of hashing threads. Default: 1"
        )
        parser.add_argument(
            "--verify",
            action="store_true",
            help="Confirm hash matches with a byte-by-byte comparison"
        )

        # Output options
        parser.add_argument(
            "--sort", "-s",
            choices=SORT_CHOICES,
            default="path",
            help=SORT_HELP_TEXT
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the report as JSON"
        )
        parser.add_argument(
            "--no-stats",
            action="store_true",
            help="Omit the scanned/hashed summary"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print errors"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="count",
            default=0,
            help="Show progress (-v) and debug logging (-vv)"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        if self.quiet:
            level = logging.ERROR
        elif self.verbose >= 2:
            level = logging.DEBUG
        elif self.verbose == 1:
            level = logging.INFO
        else:
            level = logging.WARNING
        logging.getLogger().setLevel(level)

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams(
                root_dir=args.directory,
                include=args.include,
                exclude=args.exclude,
                include_empty=args.include_empty,
                sort_key=SORT_ALIASES.get(args.sort, SortKey.PATH),
                algorithm=args.algorithm,
                jobs=args.jobs,
                verify=args.verify,
            )
        except ConfigError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose or self.quiet:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_scan(self, params: ScanParams) -> ScanReport:
        """Execute the scan, turning fatal errors into exit codes."""
        command = ScanCommand()
        if self.verbose:
            print(f"Scanning directory: {params.root_dir}", file=sys.stderr)

        try:
            report = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except ConfigError as e:
            self.error_exit(f"Invalid configuration: {e}")
        except TraversalError as e:
            self.error_exit(str(e))

        if self.verbose and not self.quiet:
            sys.stderr.write("\n")
        return report

    def output_results(self, report: ScanReport, as_json: bool = False, show_stats: bool = True) -> None:
        """Print the report to stdout."""
        if as_json:
            print(JsonRenderer().render(report))
            return
        if self.quiet:
            return
        print(TextRenderer(show_stats=show_stats).render(report))

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        params = self.create_params(args)
        report = self.run_scan(params)

        if report.cancelled:
            self.warning("Scan was cancelled, results are incomplete")

        self.output_results(report, as_json=args.json, show_stats=not args.no_stats)

        elapsed = time.time() - self.start_time
        if self.verbose and not self.quiet:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
