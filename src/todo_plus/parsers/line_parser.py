"""
Parser for single task lines.

Main API:
    parse_line(raw)  → TaskLine, or None when the line is not a task

A task line is any line whose trimmed text starts with one of the status
glyphs (☐ open, ✔ done, ✘ cancelled). Everything after the glyph is split
into @name(value) tags and the human-readable content; one balanced layer of
strikethrough (~~...~~) and one of emphasis (_..._) are peeled off the
content and recorded as its decoration.
"""

import re
from typing import Dict, Optional, Tuple

from todo_plus.models.task_line import DECORATION_MARKERS, GLYPH_TO_STATUS, Decoration, TaskLine

# @name(value): lowercase name, value runs up to the first ")"
TAG_PATTERN = re.compile(r"@([a-z]+)\(([^)]*)\)")

_WHITESPACE_RUN = re.compile(r"\s+")

# What is left of a tag whose ")" never came
_UNCLOSED_TAG = re.compile(r"@[a-z]+\(")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def split_tags(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Split text into content and tags.

    Tags may appear anywhere in the text; each one is removed from the
    content. When a tag name repeats, the last occurrence wins (its value
    replaces the earlier one, its position is that of the first).

    Args:
        text: Text following the status glyph

    Returns:
        Tuple of (content, tags) where content has its whitespace collapsed
    """
    tags: Dict[str, str] = {}
    for match in TAG_PATTERN.finditer(text):
        tags[match.group(1)] = match.group(2)

    content = TAG_PATTERN.sub(" ", text)
    return collapse_whitespace(content), tags


def _peel(content: str, decoration: Decoration) -> Optional[str]:
    """Strip one balanced layer of the decoration's marker, or None if absent."""
    marker = DECORATION_MARKERS[decoration]
    if (
        len(content) >= 2 * len(marker)
        and content.startswith(marker)
        and content.endswith(marker)
    ):
        return content[len(marker):len(content) - len(marker)]
    return None


def strip_decoration(content: str) -> Tuple[str, Decoration]:
    """
    Remove one layer of ~~strike~~ and then one layer of _emphasis_.

    Unbalanced markers ("~~foo", "foo_") are left in place as literal text.

    Returns:
        Tuple of (bare content, outermost decoration found)
    """
    found = Decoration.NONE
    for decoration in (Decoration.STRIKE, Decoration.EMPHASIS):
        peeled = _peel(content, decoration)
        if peeled is None:
            continue
        content = peeled.strip()
        if found is Decoration.NONE:
            found = decoration
    return content, found


def parse_status_glyph(stripped: str) -> Optional[Tuple[str, str]]:
    """
    Split a trimmed line into its leading glyph and the remainder.

    Returns:
        Tuple of (glyph, remainder) or None if the line is not a task
    """
    if not stripped or stripped[0] not in GLYPH_TO_STATUS:
        return None
    return stripped[0], stripped[1:]


def _drop_glyphs(content: str) -> str:
    while content and content[0] in GLYPH_TO_STATUS:
        content = content[1:].lstrip()
    return content


def has_unclosed_tag(content: str) -> bool:
    """
    True if the content holds an "@name(" with no closing ")".

    Tags rendered after such content would be swallowed into its value the
    next time the line is parsed, so transitions leave these lines alone.
    """
    return _UNCLOSED_TAG.search(content) is not None


def is_task_line(raw: str) -> bool:
    return parse_status_glyph(raw.strip()) is not None


def parse_line(raw: str) -> Optional[TaskLine]:
    """
    Parse a single line into a TaskLine.

    Args:
        raw: The line as it appears in the document (no trailing newline)

    Returns:
        TaskLine, or None if the line does not start with a status glyph
    """
    stripped = raw.strip()
    split = parse_status_glyph(stripped)
    if split is None:
        return None

    glyph, remainder = split
    indent = raw[:len(raw) - len(raw.lstrip())]

    content, tags = split_tags(remainder)

    # A second glyph at the start of the content is never content, inside
    # the markup or outside it
    content = _drop_glyphs(content)
    content, decoration = strip_decoration(content)
    content = _drop_glyphs(content)

    return TaskLine(
        status=GLYPH_TO_STATUS[glyph],
        content=content,
        tags=tags,
        decoration=decoration,
        indent=indent,
    )
