"""
Command-line surface.

stdout carries results (diffs or JSON); stderr carries logs, summaries
and errors.
"""

from .commands import annotate_command
from .errors import CLIError
from .main import build_parser, main

__all__ = [
    "annotate_command",
    "build_parser",
    "main",
    "CLIError",
]
