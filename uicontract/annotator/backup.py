"""
Backup management for safe in-place modification.

Copies files to <backup_dir>/<path relative to their common ancestor>
before they are rewritten, and can copy them back or discard the copies.
Backups never expire on their own.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import BackupError
from .models import DEFAULT_BACKUP_DIR, BackupResult

logger = logging.getLogger(__name__)


def common_ancestor(paths: Sequence[str]) -> Path:
    """
    Longest common ancestor directory of absolute paths.

    Compares path segments position by position. One path yields its
    parent directory; no paths yields the current directory.
    """
    if not paths:
        return Path.cwd()
    if len(paths) == 1:
        return Path(paths[0]).parent

    split = [Path(p).parts for p in paths]
    common: List[str] = []
    for segments in zip(*split):
        if any(s != segments[0] for s in segments[1:]):
            break
        common.append(segments[0])

    if not common:
        return Path(os.sep)
    return Path(*common)


def _relative_layout(files: Sequence[str]) -> List[Tuple[Path, Path]]:
    ancestor = common_ancestor(files)
    return [(Path(f), Path(f).relative_to(ancestor)) for f in files]


def create_backup(
    file_paths: Iterable[str],
    backup_dir: Optional[str] = None,
) -> BackupResult:
    """
    Copy each file into backup_dir, mirroring its relative directory tree.

    Returns the absolute backup directory and the original absolute paths.
    Raises BackupError if any copy fails.
    """
    root = Path(backup_dir or DEFAULT_BACKUP_DIR).resolve()
    files = list(dict.fromkeys(str(Path(p).resolve()) for p in file_paths))

    try:
        root.mkdir(parents=True, exist_ok=True)
        for original, relative in _relative_layout(files):
            dest = root / relative
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(original, dest)
    except OSError as e:
        raise BackupError(f"Failed to create backup in {root}: {e}") from e

    logger.info(f"Backed up {len(files)} file(s) to {root}")
    return BackupResult(backup_dir=str(root), files=files)


def restore_backup(backup: BackupResult) -> None:
    """
    Copy every backed-up file back to its original location.

    Restores all files, not a subset; running it twice is harmless.
    Raises BackupError if any copy fails.
    """
    root = Path(backup.backup_dir)

    try:
        for original, relative in _relative_layout(backup.files):
            original.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(root / relative, original)
    except OSError as e:
        raise BackupError(f"Failed to restore backup from {root}: {e}") from e

    logger.info(f"Restored {len(backup.files)} file(s) from {root}")


def cleanup_backup(backup: BackupResult) -> None:
    """
    Remove the backup directory.

    A missing directory is not an error. Any other failure is logged as a
    warning naming the directory.
    """
    root = Path(backup.backup_dir)
    if not root.exists():
        logger.debug(f"Backup {root} already gone")
        return

    try:
        shutil.rmtree(root)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning(f"Could not remove backup {root}: {e}")
        return

    logger.info(f"Removed backup {root}")
