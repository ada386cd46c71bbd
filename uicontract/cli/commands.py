"""
`uic annotate` - insert data-agent-id attributes into source files.

Dry run (default) prints unified diffs. --write backs up every file about
to change, writes the new contents, and discards the backup on success or
restores it on failure.

Exit codes:
- 0: Success (including "nothing to do")
- 1: Manifest load failure or unrecoverable write error
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from ..annotator import (
    AnnotateOptions,
    AnnotateResult,
    BackupError,
    FileWriteError,
    annotate_files,
    cleanup_backup,
    restore_backup,
)
from ..manifest import ManifestError, NamedElement, load_manifest, resolve_element_paths
from .errors import CLIError

logger = logging.getLogger(__name__)


def _load_elements(manifest_arg: str) -> List[NamedElement]:
    """Load the manifest and resolve element paths against the working directory."""
    manifest_path = Path(manifest_arg).resolve()
    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as e:
        raise CLIError(
            f'Failed to load manifest "{manifest_path}": {e}',
            hint='Generate a manifest by scanning and naming first, or specify --manifest <path>.',
        ) from e
    logger.debug(f"Loaded {len(manifest.elements)} element(s) from {manifest_path}")
    return resolve_element_paths(manifest.elements)


def _print_json(result: AnnotateResult) -> None:
    print(json.dumps(result.to_json_dict(), indent=2))


def _report_dry_run(result: AnnotateResult) -> None:
    patches = result.patches
    if not patches:
        print("No changes needed (all annotations already present).")
        return

    for i, patch in enumerate(patches):
        if i:
            print()
        print(patch.diff)

    print(
        f"\nDry run: {result.total_applied} annotation(s) would be applied "
        f"across {len(patches)} file(s).",
        file=sys.stderr,
    )
    print("Run with --write to apply changes.", file=sys.stderr)


def _report_write(result: AnnotateResult) -> None:
    if result.backup is None:
        print("No files need modification (all annotations already present).")
        return

    print(f"Annotated {len(result.patches)} file(s)", file=sys.stderr)
    print(f"  Annotations applied: {result.total_applied}", file=sys.stderr)
    print(f"  Annotations skipped: {result.total_skipped}", file=sys.stderr)
    print(f"  Backup: {result.backup.backup_dir}", file=sys.stderr)


def _recover(err: FileWriteError) -> None:
    """Put every file back from the pre-write backup, then discard it."""
    if err.backup is None:
        return
    try:
        restore_backup(err.backup)
    except BackupError as restore_err:
        print(f"ERROR: {restore_err}", file=sys.stderr)
        print(f"  Original files remain in {err.backup.backup_dir}", file=sys.stderr)
        return
    print("Restored original files from backup.", file=sys.stderr)
    cleanup_backup(err.backup)


def annotate_command(args: argparse.Namespace) -> int:
    """
    Run the annotate command.

    Args:
        args: parsed namespace with manifest, write, backup_dir, json
    """
    try:
        elements = _load_elements(args.manifest)
    except CLIError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        if e.hint:
            print(e.hint, file=sys.stderr)
        return 1

    if not elements:
        if args.json:
            _print_json(AnnotateResult(files=[], total_applied=0, total_skipped=0))
        else:
            print("No elements to annotate.")
        return 0

    options = AnnotateOptions.from_dict(
        {"dry_run": not args.write, "write": args.write, "backup_dir": args.backup_dir}
    )

    try:
        result = annotate_files(elements, options)
    except FileWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        _recover(e)
        return 1
    except BackupError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("No files were modified.", file=sys.stderr)
        return 1

    if args.json:
        if result.backup is not None:
            # The backup is discarded before printing, so it is not reported.
            cleanup_backup(result.backup)
            result = result.model_copy(update={"backup": None})
        _print_json(result)
        return 0

    if options.writes_files:
        _report_write(result)
    else:
        _report_dry_run(result)

    if result.backup is not None:
        cleanup_backup(result.backup)

    return 0
