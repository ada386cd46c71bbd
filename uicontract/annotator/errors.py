"""
Annotator-specific errors.

Per-target problems (unlocatable tag, out-of-range line) are soft
failures and are never raised. Only file-level I/O failures surface here.
"""


class AnnotatorError(Exception):
    """Base exception for annotator failures."""

    pass


class BackupError(AnnotatorError):
    """Failed to create or restore a backup."""

    pass


class FileWriteError(AnnotatorError):
    """
    Failed to write annotated content back to disk.

    Carries the backup taken before the write so the caller can restore.
    """

    def __init__(self, message: str, file_path: str, backup=None):
        self.file_path = file_path
        self.backup = backup
        super().__init__(message)
