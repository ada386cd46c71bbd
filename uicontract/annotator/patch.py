"""
Unified diff generation for annotated files.

Produces standard unified diff text (--- / +++ headers, @@ hunk headers,
3 lines of context) for human review.

The line matcher is a bounded-lookahead heuristic, not an LCS/Myers diff.
It does not promise a minimal edit script, only a correct one: equal input
yields an empty diff, and every hunk carries accurate headers and context.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .models import FilePatch


CONTEXT_LINES = 3
MAX_LOOKAHEAD = 20

EQUAL = "equal"
ADD = "add"
REMOVE = "remove"


@dataclass(frozen=True)
class _Change:
    """One line record. original_idx is None for adds, modified_idx for removes."""

    kind: str
    original_idx: Optional[int]
    modified_idx: Optional[int]


@dataclass
class _Hunk:
    original_start: int
    original_count: int
    modified_start: int
    modified_count: int
    lines: List[str]

    def header(self) -> str:
        return (
            f"@@ -{self.original_start},{self.original_count} "
            f"+{self.modified_start},{self.modified_count} @@"
        )


def generate_patch(file_path: str, original: str, modified: str) -> FilePatch:
    """
    Build a FilePatch from two versions of a file.

    The diff is empty when the texts are identical.
    """
    diff = format_unified_diff(file_path, original.split("\n"), modified.split("\n"))
    return FilePatch(file_path=file_path, original=original, modified=modified, diff=diff)


def _find_sync(
    original_lines: Sequence[str],
    modified_lines: Sequence[str],
    oi: int,
    mi: int,
) -> Optional[Tuple[int, int]]:
    """
    Find the nearest point after a mismatch where both sides line up again.

    At each distance, tries a substitution (both advance), then an insertion
    (only modified advances), then a deletion (only original advances).
    """
    o_end = min(len(original_lines), oi + MAX_LOOKAHEAD)
    m_end = min(len(modified_lines), mi + MAX_LOOKAHEAD)

    for dist in range(1, MAX_LOOKAHEAD):
        if oi + dist < o_end and mi + dist < m_end:
            if original_lines[oi + dist] == modified_lines[mi + dist]:
                return oi + dist, mi + dist

        if mi + dist < m_end and original_lines[oi] == modified_lines[mi + dist]:
            return oi, mi + dist

        if oi + dist < o_end and original_lines[oi + dist] == modified_lines[mi]:
            return oi + dist, mi

    return None


def _compute_changes(
    original_lines: Sequence[str],
    modified_lines: Sequence[str],
) -> List[_Change]:
    changes: List[_Change] = []
    oi = 0
    mi = 0

    while oi < len(original_lines) and mi < len(modified_lines):
        if original_lines[oi] == modified_lines[mi]:
            changes.append(_Change(EQUAL, oi, mi))
            oi += 1
            mi += 1
            continue

        sync = _find_sync(original_lines, modified_lines, oi, mi)
        if sync is None:
            break

        sync_oi, sync_mi = sync
        changes.extend(_Change(REMOVE, i, None) for i in range(oi, sync_oi))
        changes.extend(_Change(ADD, None, i) for i in range(mi, sync_mi))
        oi, mi = sync_oi, sync_mi

    # Whatever is left on either side (no sync point, or one side ran out)
    changes.extend(_Change(REMOVE, i, None) for i in range(oi, len(original_lines)))
    changes.extend(_Change(ADD, None, i) for i in range(mi, len(modified_lines)))

    return changes


def _infer_start(changes: Sequence[_Change], from_idx: int, side: str) -> int:
    """
    1-based start on one side for a hunk whose first record lacks that side.

    Walks back to the nearest record that has an index on `side`; the hunk
    starts on the line after it.
    """
    attr = "original_idx" if side == "original" else "modified_idx"
    for i in range(from_idx - 1, -1, -1):
        idx = getattr(changes[i], attr)
        if idx is not None:
            return idx + 2
    return 1


def _group_ranges(changed: Sequence[int]) -> List[Tuple[int, int]]:
    ranges: List[Tuple[int, int]] = []
    start = end = changed[0]
    for idx in changed[1:]:
        if idx - end <= CONTEXT_LINES * 2:
            end = idx
        else:
            ranges.append((start, end))
            start = end = idx
    ranges.append((start, end))
    return ranges


def _build_hunk(
    changes: Sequence[_Change],
    first: int,
    last: int,
    original_lines: Sequence[str],
    modified_lines: Sequence[str],
) -> _Hunk:
    lo = max(0, first - CONTEXT_LINES)
    hi = min(len(changes) - 1, last + CONTEXT_LINES)

    lines: List[str] = []
    orig_count = 0
    mod_count = 0
    orig_start: Optional[int] = None
    mod_start: Optional[int] = None

    for i in range(lo, hi + 1):
        change = changes[i]
        if change.kind == EQUAL:
            lines.append(" " + original_lines[change.original_idx])
            orig_count += 1
            mod_count += 1
            if orig_start is None:
                orig_start = change.original_idx + 1
            if mod_start is None:
                mod_start = change.modified_idx + 1
        elif change.kind == REMOVE:
            lines.append("-" + original_lines[change.original_idx])
            orig_count += 1
            if orig_start is None:
                orig_start = change.original_idx + 1
            if mod_start is None:
                mod_start = _infer_start(changes, i, "modified")
        else:
            lines.append("+" + modified_lines[change.modified_idx])
            mod_count += 1
            if mod_start is None:
                mod_start = change.modified_idx + 1
            if orig_start is None:
                orig_start = _infer_start(changes, i, "original")

    return _Hunk(
        original_start=orig_start or 1,
        original_count=orig_count,
        modified_start=mod_start or 1,
        modified_count=mod_count,
        lines=lines,
    )


def format_unified_diff(
    file_path: str,
    original_lines: Sequence[str],
    modified_lines: Sequence[str],
) -> str:
    """
    Render a unified diff between two line lists.

    Returns "" when nothing differs. Changes closer than 2 * CONTEXT_LINES
    records share a hunk.
    """
    changes = _compute_changes(original_lines, modified_lines)
    changed = [i for i, c in enumerate(changes) if c.kind != EQUAL]

    if not changed:
        return ""

    output = [f"--- a/{file_path}", f"+++ b/{file_path}"]
    for first, last in _group_ranges(changed):
        hunk = _build_hunk(changes, first, last, original_lines, modified_lines)
        output.append(hunk.header())
        output.extend(hunk.lines)

    return "\n".join(output)
