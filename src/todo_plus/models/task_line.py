"""
Task line data model.

A TaskLine is the structured form of a single line of text such as

    ☐ Buy milk @started(2024-01-01 09:30)

It is rebuilt from text on every operation and thrown away after it has been
serialised again; the document itself is the only source of truth. The
canonical rendering lives in utils.formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional


class TaskStatus(str, Enum):
    OPEN = "open"
    DONE = "done"
    CANCELLED = "cancelled"


class Decoration(str, Enum):
    NONE = "none"
    STRIKE = "strike"
    EMPHASIS = "emphasis"


STATUS_TO_GLYPH: Dict[TaskStatus, str] = {
    TaskStatus.OPEN: "☐",
    TaskStatus.DONE: "✔",
    TaskStatus.CANCELLED: "✘",
}

GLYPH_TO_STATUS: Dict[str, TaskStatus] = {v: k for k, v in STATUS_TO_GLYPH.items()}

# Markup each status wraps its content in
STATUS_DECORATION: Dict[TaskStatus, Decoration] = {
    TaskStatus.OPEN: Decoration.NONE,
    TaskStatus.DONE: Decoration.STRIKE,
    TaskStatus.CANCELLED: Decoration.EMPHASIS,
}

DECORATION_MARKERS: Dict[Decoration, str] = {
    Decoration.NONE: "",
    Decoration.STRIKE: "~~",
    Decoration.EMPHASIS: "_",
}

# Tags written by transitions, in serialisation order
STARTED = "started"
DONE = "done"
CANCELLED = "cancelled"
LASTED = "lasted"
WASTED = "wasted"

TIME_TAGS = (STARTED, DONE, CANCELLED, LASTED, WASTED)
COMPLETION_TAGS = (DONE, CANCELLED, LASTED, WASTED)


@dataclass
class TaskLine:
    """
    A parsed task line.

    Tags map name to literal value. Anything a transition does not explicitly
    produce or drop is carried through untouched, so arbitrary @name(value)
    annotations survive every transition.
    """

    status: TaskStatus
    content: str = ""
    tags: Dict[str, str] = field(default_factory=dict)
    decoration: Decoration = Decoration.NONE
    indent: str = ""

    @property
    def glyph(self) -> str:
        return STATUS_TO_GLYPH[self.status]

    @property
    def started(self) -> Optional[str]:
        return self.tags.get(STARTED)

    def without_tags(self, *names: str) -> Dict[str, str]:
        """Copy of the tag mapping with the given names removed."""
        return {k: v for k, v in self.tags.items() if k not in names}

    def evolve(self, **changes) -> TaskLine:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
