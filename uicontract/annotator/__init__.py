"""
Source annotation and patch engine.

Public API: annotate_files (main entry point) plus the lower-level pieces
it is built from: source annotation, patch generation, backup management.
"""

from .backup import cleanup_backup, common_ancestor, create_backup, restore_backup
from .engine import annotate_files
from .errors import AnnotatorError, BackupError, FileWriteError
from .models import (
    DATA_AGENT_ID_ATTR,
    DEFAULT_ANNOTATE_OPTIONS,
    DEFAULT_BACKUP_DIR,
    AnnotateFileResult,
    AnnotateOptions,
    AnnotateResult,
    AnnotationResult,
    AnnotationTarget,
    BackupResult,
    FilePatch,
)
from .patch import format_unified_diff, generate_patch
from .source import annotate_source, annotate_vue_source

__all__ = [
    "annotate_files",
    "annotate_source",
    "annotate_vue_source",
    "generate_patch",
    "format_unified_diff",
    "create_backup",
    "restore_backup",
    "cleanup_backup",
    "common_ancestor",
    "AnnotatorError",
    "BackupError",
    "FileWriteError",
    "DATA_AGENT_ID_ATTR",
    "DEFAULT_ANNOTATE_OPTIONS",
    "DEFAULT_BACKUP_DIR",
    "AnnotateFileResult",
    "AnnotateOptions",
    "AnnotateResult",
    "AnnotationResult",
    "AnnotationTarget",
    "BackupResult",
    "FilePatch",
]
