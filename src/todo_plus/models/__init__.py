from .task_line import (
    COMPLETION_TAGS,
    Decoration,
    GLYPH_TO_STATUS,
    STATUS_DECORATION,
    STATUS_TO_GLYPH,
    TaskLine,
    TaskStatus,
)

__all__ = [
    "TaskLine",
    "TaskStatus",
    "Decoration",
    "STATUS_TO_GLYPH",
    "GLYPH_TO_STATUS",
    "STATUS_DECORATION",
    "COMPLETION_TAGS",
]
