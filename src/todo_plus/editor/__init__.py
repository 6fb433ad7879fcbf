from .actions import TASK_STUB, CommandOutcome, insert_task, remove_line, run_command
from .buffer import TextBuffer
from .ports import Editor, Position

__all__ = [
    "Editor",
    "Position",
    "TextBuffer",
    "CommandOutcome",
    "TASK_STUB",
    "run_command",
    "insert_task",
    "remove_line",
]
