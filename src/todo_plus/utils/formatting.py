"""
Canonical rendering of task lines.

This module is the single source of truth for how a TaskLine is written back
to text:

    <indent><glyph> <decorated content> <tags>

Time tags always come first in a fixed order (started, done, cancelled,
lasted, wasted); any other tags follow in the order they were found.
"""

from typing import Dict, List

from todo_plus.models.task_line import DECORATION_MARKERS, Decoration, TIME_TAGS, TaskLine


def render_tag(name: str, value: str) -> str:
    """Render a single tag, e.g. ("done", "2024-01-01 10:00") → "@done(2024-01-01 10:00)"."""
    return f"@{name}({value})"


def ordered_tag_names(tags: Dict[str, str]) -> List[str]:
    names = [name for name in TIME_TAGS if name in tags]
    names.extend(name for name in tags if name not in TIME_TAGS)
    return names


def render_tags(tags: Dict[str, str]) -> str:
    """
    Render all tags to a space-separated string.

    Args:
        tags: Dict mapping tag names to values

    Returns:
        Space-separated string of rendered tags, or empty string if no tags
    """
    return " ".join(render_tag(name, tags[name]) for name in ordered_tag_names(tags))


def decorate(content: str, decoration: Decoration) -> str:
    marker = DECORATION_MARKERS[decoration]
    return f"{marker}{content}{marker}"


def render_line(line: TaskLine) -> str:
    """
    Serialise a TaskLine back to a single line of text.

    Parts are joined with single spaces and empty parts are skipped, so the
    result never carries trailing whitespace or double spaces between parts.
    """
    content = decorate(line.content, line.decoration)
    parts = [part for part in (line.glyph, content, render_tags(line.tags)) if part]
    return line.indent + " ".join(parts)
