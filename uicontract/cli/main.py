"""
uic CLI - thin entrypoint for operator commands.

Design Principles:
==================
- CLI is a dispatcher only
- No annotation logic inside the CLI
- Surface errors verbatim from the annotator
- Exit non-zero on failure
- No interactive prompts

Exit Codes:
===========
- 0: Success
- 1: Command error (manifest load, write failure)
- 2: Usage error (argparse)
"""

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..annotator import DEFAULT_BACKUP_DIR
from .commands import annotate_command


LOG_FORMAT = "[uic] [%(levelname)s] %(message)s"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send all log output to stderr. Default WARNING, --verbose DEBUG, --quiet ERROR."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uic",
        description="Stable identifiers for interactive UI elements",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Errors only (also hides warnings about unreadable source files)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    annotate = subparsers.add_parser(
        "annotate",
        help="Insert data-agent-id attributes into source files",
        description="Insert data-agent-id attributes into source files based on a manifest.",
        epilog=(
            "examples:\n"
            "  uic annotate\n"
            "  uic annotate --manifest named-manifest.json --dry-run\n"
            "  uic annotate --write --backup-dir ./my-backup\n"
            "  uic annotate --json"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    annotate.add_argument(
        "--manifest",
        default="manifest.json",
        help="Path to manifest file (default: manifest.json)",
    )
    mode = annotate.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Show patches without modifying files (default)",
    )
    mode.add_argument(
        "--write",
        action="store_true",
        help="Modify source files in place (creates a backup first)",
    )
    annotate.add_argument(
        "--backup-dir",
        default=DEFAULT_BACKUP_DIR,
        help=f"Backup directory (default: {DEFAULT_BACKUP_DIR})",
    )
    annotate.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON (with --write the backup is already discarded, so backup is null)",
    )
    annotate.set_defaults(func=annotate_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
