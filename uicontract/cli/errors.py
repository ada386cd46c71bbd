"""
CLI-specific error types.

All CLI errors inherit from CLIError for consistent handling.
"""


class CLIError(Exception):
    """Base exception for all CLI-related failures."""

    def __init__(self, message: str, hint: str = ""):
        self.message = message
        self.hint = hint
        super().__init__(message)
