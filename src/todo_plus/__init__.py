"""
todo-plus: plain-text task lines with status glyphs and time tags.

Main API:
    from todo_plus import parse_line, render_line, transition_text

    result = transition_text("☐ Buy milk", "set-done")
    result.text  # "✔ ~~Buy milk~~ @done(2024-01-01 10:00)"
"""

from .engine.transitions import Command, TransitionResult, transition, transition_text
from .models.task_line import Decoration, TaskLine, TaskStatus
from .parsers.line_parser import parse_line, split_tags
from .utils.dates import format_duration
from .utils.formatting import render_line, render_tags

__all__ = [
    # Models
    "TaskLine",
    "TaskStatus",
    "Decoration",
    # Main API
    "parse_line",
    "render_line",
    "transition",
    "transition_text",
    "Command",
    "TransitionResult",
    # Utilities
    "split_tags",
    "render_tags",
    "format_duration",
]
