"""
Tag span location.

Finds an opening tag from a reported 1-based line/column and tag name,
then scans forward to the '>' that closes it. The scan is a small lexical
state machine (normal / in-string / in-expression), not a parser, so it
works the same for JSX and HTML-style templates.
"""

from typing import List, Optional, Tuple


# Parsers occasionally report a column a character or two off.
COLUMN_TOLERANCE = 2

QUOTE_CHARS = ("\"", "'", "`")


def _tag_name_starts_at(line: str, pos: int, tag_name: str) -> bool:
    """
    True if tag_name starts at pos and is not a prefix of a longer name.

    The name must be followed by whitespace, '>', '/', or end of line
    (the tag continues on the next line).
    """
    if not tag_name or not line.startswith(tag_name, pos):
        return False
    after = pos + len(tag_name)
    if after >= len(line):
        return True
    ch = line[after]
    return ch.isspace() or ch in "/>"


def locate_tag_start(line: str, column: int, tag_name: str) -> Optional[int]:
    """
    Return the 0-based index of the '<' opening tag_name near column.

    Looks at column first, then within COLUMN_TOLERANCE characters either
    side. Returns None if no '<' is found there or the name does not match.
    """
    col0 = column - 1

    if 0 <= col0 < len(line) and line[col0] == "<":
        start = col0
    else:
        lo = max(0, col0 - COLUMN_TOLERANCE)
        hi = max(0, col0 + COLUMN_TOLERANCE + 1)
        start = line.find("<", lo, hi)
        if start == -1:
            return None

    if not _tag_name_starts_at(line, start + 1, tag_name):
        return None
    return start


def locate_insertion_point(line: str, column: int, tag_name: str) -> Optional[int]:
    """
    Return the index right after the tag name, where an attribute can go.

    Given '  <button className="btn">' with column 3 and tag 'button',
    returns 9. None when the tag cannot be confidently located.
    """
    start = locate_tag_start(line, column, tag_name)
    if start is None:
        return None
    return start + 1 + len(tag_name)


def locate_tag_close(
    lines: List[str],
    start_line_idx: int,
    start_col: int = 0,
) -> Optional[Tuple[int, int]]:
    """
    Find the (line index, column) of the '>' closing the opening tag.

    Scanning starts at lines[start_line_idx][start_col]. Angle brackets
    inside string literals or {...} expressions never count. Returns None
    if the input ends before the tag closes.
    """
    depth = 0
    in_string: Optional[str] = None
    expr_depth = 0

    for i in range(start_line_idx, len(lines)):
        line = lines[i]
        j = start_col if i == start_line_idx else 0
        escaped = False

        while j < len(line):
            ch = line[j]

            if in_string is not None:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == in_string:
                    in_string = None
                j += 1
                continue

            if ch == "{":
                expr_depth += 1
            elif ch == "}" and expr_depth > 0:
                expr_depth -= 1
            elif ch in QUOTE_CHARS:
                in_string = ch
            elif expr_depth > 0:
                pass
            elif ch == "<":
                depth += 1
            elif ch == ">":
                depth -= 1
                if depth <= 0:
                    return i, j
            j += 1

    return None


def locate_tag_end_line(
    lines: List[str],
    start_line_idx: int,
    start_col: int = 0,
) -> int:
    """
    Return the index of the line holding the tag's closing '>'.

    Falls back to start_line_idx when no close is found.
    """
    close = locate_tag_close(lines, start_line_idx, start_col)
    if close is None:
        return start_line_idx
    return close[0]
