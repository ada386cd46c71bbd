"""
Attribute insertion and in-place update inside a tag span.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeEdit:
    """
    Outcome of one attribute edit.

    applied: tag_text was changed
    skipped: the attribute already held the desired value
    Neither flag set means the edit could not be placed.
    """

    tag_text: str
    applied: bool = False
    skipped: bool = False


@lru_cache(maxsize=None)
def _existing_attr_re(attr_name: str) -> Pattern[str]:
    # Group 1 is the quote, group 2 the value. The value may not contain the
    # opening quote unless it is backslash-escaped.
    return re.compile(
        r"(?<![\w-])" + re.escape(attr_name) + r"""=(["'])((?:\\.|(?!\1).)*)\1"""
    )


@lru_cache(maxsize=None)
def _attr_start_re(attr_name: str) -> Pattern[str]:
    return re.compile(r"(?<![\w-])" + re.escape(attr_name) + r"""\s*=\s*["']""")


def format_attribute(attr_name: str, value: str) -> str:
    """Render attr_name="value", always double-quoted."""
    return f'{attr_name}="{value}"'


def apply_attribute(
    tag_text: str,
    attr_name: str,
    desired_value: str,
    insert_at: Optional[int] = None,
) -> AttributeEdit:
    """
    Insert or update attr_name inside tag_text.

    If the attribute exists with desired_value, nothing changes (skipped).
    If it exists with another value, only that occurrence is rewritten,
    normalized to double quotes. Otherwise ' attr="value"' is inserted at
    insert_at (the index right after the tag name); with no insert_at the
    edit cannot be placed.

    An attribute with an unterminated quote does not match and a second
    attribute is inserted next to it.
    """
    match = _existing_attr_re(attr_name).search(tag_text)

    if match is not None:
        if match.group(2) == desired_value:
            return AttributeEdit(tag_text=tag_text, skipped=True)
        new_text = (
            tag_text[: match.start()]
            + format_attribute(attr_name, desired_value)
            + tag_text[match.end():]
        )
        return AttributeEdit(tag_text=new_text, applied=True)

    if insert_at is None:
        return AttributeEdit(tag_text=tag_text)

    if _attr_start_re(attr_name).search(tag_text):
        logger.warning(
            f"Malformed {attr_name} attribute (unterminated quote); "
            f"inserting a new one next to it"
        )

    new_text = (
        tag_text[:insert_at]
        + " "
        + format_attribute(attr_name, desired_value)
        + tag_text[insert_at:]
    )
    return AttributeEdit(tag_text=new_text, applied=True)
