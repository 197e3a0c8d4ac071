from dupscan.core.models import SortKey

SORT_ALIASES = {
    "path": SortKey.PATH,
    "size": SortKey.SIZE,
}

SORT_CHOICES = list(SORT_ALIASES.keys())

SORT_HELP_TEXT = (
    "Order of duplicate groups in the report:\n"
    "  path : alphabetical by the smallest path in each group\n"
    "  size : largest duplicated files first\n"
    "Default: path"
)

ALGORITHM_HELP_TEXT = (
    "Hash algorithm used for content comparison:\n"
    "  sha1   : default, cryptographic\n"
    "  sha256 : slower, stronger\n"
    "  md5    : cryptographically broken, still fine for accidental duplicates\n"
    "  xxh64  : fastest, not cryptographic (combine with --verify)\n"
)

EPILOG_TEXT = """
Examples:
  Find duplicates in the current directory
  %(prog)s

  Find duplicates in Backups, largest first
  %(prog)s ~/Backups --sort size

  Only look at photos, ignore anything inside .git directories
  %(prog)s ~/Pictures -i '.*\\.(jpg|png)' -e '.*/\\.git/.*'

  Hash with 8 threads and confirm every match byte by byte
  %(prog)s /mnt/storage --jobs 8 --verify

  Machine-readable output
  %(prog)s ~/Backups --json > report.json
"""
