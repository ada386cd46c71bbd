"""
Annotation orchestration across files.

1. Group elements by file path
2. For each file: read, annotate, build a patch if anything changed
3. In write mode: back up every file about to change, then write them

Discarding the backup after a successful write, or restoring it after a
failed one, is the caller's decision.
"""

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from .backup import create_backup
from .errors import FileWriteError
from .models import (
    DEFAULT_ANNOTATE_OPTIONS,
    AnnotateFileResult,
    AnnotateOptions,
    AnnotateResult,
    AnnotationTarget,
    BackupResult,
)
from .patch import generate_patch
from .source import annotate_source

logger = logging.getLogger(__name__)


def group_by_file(elements: Iterable[Any]) -> "OrderedDict[str, List[AnnotationTarget]]":
    """Convert named elements into annotation targets keyed by file path."""
    groups: "OrderedDict[str, List[AnnotationTarget]]" = OrderedDict()
    for element in elements:
        groups.setdefault(element.file_path, []).append(AnnotationTarget.from_element(element))
    return groups


def display_path(file_path: str) -> str:
    """Path as shown in diff headers: relative to the working directory when possible."""
    try:
        return Path(file_path).resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return Path(file_path).as_posix()


def read_source(file_path: str) -> str:
    # newline="" keeps CRLF line endings byte-for-byte
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_source(file_path: str, content: str) -> None:
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def annotate_files(
    elements: Iterable[Any],
    options: Optional[AnnotateOptions] = None,
) -> AnnotateResult:
    """
    Annotate source files with data-agent-id attributes.

    Elements need agent_id, file_path, line, column, type and
    source_tag_name. A file that cannot be read is logged and skipped; the
    rest of the batch continues.

    Raises:
        BackupError: backup before writing failed; nothing was written
        FileWriteError: a write failed; err.backup holds the pre-write copies
    """
    options = options or DEFAULT_ANNOTATE_OPTIONS

    file_results: List[AnnotateFileResult] = []
    pending_writes: List[Tuple[str, str]] = []
    total_applied = 0
    total_skipped = 0

    for file_path, targets in group_by_file(elements).items():
        try:
            source = read_source(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f'Could not read "{file_path}", skipping: {e}')
            continue

        result = annotate_source(source, targets)

        patch = None
        if result.modified:
            patch = generate_patch(
                display_path(file_path), result.original_source, result.annotated_source
            )
            pending_writes.append((file_path, result.annotated_source))

        file_results.append(
            AnnotateFileResult(
                file_path=file_path,
                annotations_applied=result.annotations_applied,
                annotations_skipped=result.annotations_skipped,
                patch=patch,
            )
        )
        total_applied += result.annotations_applied
        total_skipped += result.annotations_skipped

        logger.debug(
            f"{file_path}: applied={result.annotations_applied} "
            f"skipped={result.annotations_skipped}"
        )

    backup: Optional[BackupResult] = None

    if options.writes_files and pending_writes:
        backup = create_backup([path for path, _ in pending_writes], options.backup_dir)

        for file_path, content in pending_writes:
            try:
                write_source(file_path, content)
            except OSError as e:
                raise FileWriteError(
                    f'Failed to write "{file_path}": {e}', file_path, backup
                ) from e

        logger.info(f"Wrote {len(pending_writes)} annotated file(s)")

    return AnnotateResult(
        files=file_results,
        total_applied=total_applied,
        total_skipped=total_skipped,
        backup=backup,
    )

