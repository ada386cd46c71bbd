"""
uicontract - stable identifiers for interactive UI elements.

Discovery parsers and the naming engine produce named elements.
This package writes those identifiers back into source files as a
data-agent-id attribute.

Constraints:
- String surgery only, no source-to-source AST rewrite
- Unrelated bytes are never touched
- Re-running with the same input changes nothing
- Every in-place write is preceded by a backup
"""

__version__ = "0.1.0"
