"""
Source-level annotation: apply every target of one file in a single pass.

Uses string manipulation only, no AST. Each target is located by line and
column, its opening tag span is extracted, the attribute edit is applied
to that span, and the span is spliced back. Edits never add or remove
lines.
"""

import logging
from typing import List, Sequence

from .editor import apply_attribute
from .locator import locate_tag_close, locate_tag_start
from .models import DATA_AGENT_ID_ATTR, AnnotationResult, AnnotationTarget

logger = logging.getLogger(__name__)


def _sort_targets(targets: Sequence[AnnotationTarget]) -> List[AnnotationTarget]:
    # Bottom to top; right to left within a line so an insertion never
    # shifts the column of a target not yet processed.
    return sorted(targets, key=lambda t: (t.line, t.column), reverse=True)


def annotate_source(
    source: str,
    targets: Sequence[AnnotationTarget],
) -> AnnotationResult:
    """
    Insert data-agent-id attributes into source at each target.

    Targets whose line is out of range or whose tag cannot be located are
    skipped and counted in neither annotations_applied nor
    annotations_skipped. agent_id values are assumed unique.
    """
    if not targets:
        return AnnotationResult.unmodified(source)

    lines = source.split("\n")
    applied = 0
    skipped = 0

    for target in _sort_targets(targets):
        line_idx = target.line - 1

        if line_idx < 0 or line_idx >= len(lines):
            logger.debug(f"Target {target.agent_id} line {target.line} out of range, skipping")
            continue

        line = lines[line_idx]
        tag_name = target.tag_name
        tag_start = locate_tag_start(line, target.column, tag_name)

        if tag_start is None:
            # Without the '<' an existing attribute can still be updated,
            # but nothing can be inserted.
            span_start = 0
            insert_at = None
        else:
            span_start = tag_start
            insert_at = 1 + len(tag_name)

        close = locate_tag_close(lines, line_idx, span_start)
        if close is None:
            end_idx, end_col = line_idx, len(line)
        else:
            end_idx, end_col = close[0], close[1] + 1

        if end_idx == line_idx:
            tag_text = line[span_start:end_col]
        else:
            tag_text = "\n".join(
                [line[span_start:]] + lines[line_idx + 1:end_idx] + [lines[end_idx][:end_col]]
            )

        edit = apply_attribute(tag_text, DATA_AGENT_ID_ATTR, target.agent_id, insert_at)

        if edit.skipped:
            skipped += 1
            continue
        if not edit.applied:
            logger.debug(
                f"Could not locate <{tag_name}> for {target.agent_id} "
                f"at {target.line}:{target.column}, skipping"
            )
            continue

        spliced = line[:span_start] + edit.tag_text + lines[end_idx][end_col:]
        lines[line_idx:end_idx + 1] = spliced.split("\n")
        applied += 1

    if applied == 0:
        return AnnotationResult(
            original_source=source,
            annotated_source=source,
            modified=False,
            annotations_applied=0,
            annotations_skipped=skipped,
        )

    return AnnotationResult(
        original_source=source,
        annotated_source="\n".join(lines),
        modified=True,
        annotations_applied=applied,
        annotations_skipped=skipped,
    )


def annotate_vue_source(
    source: str,
    targets: Sequence[AnnotationTarget],
) -> AnnotationResult:
    """
    Annotate a Vue single-file component.

    The Vue parser reports file-level (not template-relative) positions and
    template tags are plain HTML, so this is annotate_source.
    """
    return annotate_source(source, targets)
