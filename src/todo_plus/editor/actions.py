"""
Editor commands.

run_command() is what a host binds to its keys: it reads the line under the
cursor through the Editor protocol, applies the command and writes the
result back. Line transitions delegate to engine.transitions; new-task and
remove-line edit the document structure directly.
"""

import logging
from dataclasses import dataclass

from todo_plus.editor.ports import Editor, Position
from todo_plus.engine.transitions import Command, transition_text
from todo_plus.models.task_line import STATUS_TO_GLYPH, TaskStatus
from todo_plus.utils.dates import Clock, system_clock

log = logging.getLogger(__name__)

# What new-task writes; the cursor lands right after it
TASK_STUB = f"{STATUS_TO_GLYPH[TaskStatus.OPEN]} "


@dataclass
class CommandOutcome:
    command: Command
    changed: bool
    cursor: Position


def insert_task(editor: Editor) -> Position:
    """
    Start a new open task at the cursor.

    A blank cursor line is replaced by the stub; otherwise the stub goes on a
    new line right below it.
    """
    row = editor.get_cursor().line
    current = editor.get_line(row)

    if not current.strip():
        editor.set_line(row, TASK_STUB)
        target = row
    else:
        editor.replace_range("\n" + TASK_STUB, Position(row, len(current)))
        target = row + 1

    cursor = Position(target, len(TASK_STUB))
    editor.set_cursor(cursor)
    return cursor


def remove_line(editor: Editor) -> Position:
    """
    Delete the cursor line together with its line break.

    The last line has no break of its own, so only its text goes and an
    empty line is left in its place.
    """
    row = editor.get_cursor().line
    count = editor.line_count()
    editor.get_line(row)  # IndexError for rows outside the document

    if row + 1 < count:
        editor.replace_range("", Position(row, 0), Position(row + 1, 0))
    else:
        editor.set_line(row, "")

    cursor = Position(min(row, editor.line_count() - 1), 0)
    editor.set_cursor(cursor)
    return cursor


def run_command(editor: Editor, command, clock: Clock = system_clock) -> CommandOutcome:
    """
    Run one of the host-facing commands against the cursor line.

    Args:
        editor: Editor collaborator holding the document
        command: Command or command id ("cycle-status", "new-task", ...)
        clock: Source of "now" for time tags

    Returns:
        CommandOutcome with whether the document changed and the cursor
    """
    command = Command.parse(command)

    if command is Command.NEW_TASK:
        cursor = insert_task(editor)
        log.debug("Inserted task stub at line %d", cursor.line)
        return CommandOutcome(command, True, cursor)

    if command is Command.REMOVE_LINE:
        row = editor.get_cursor().line
        cursor = remove_line(editor)
        log.debug("Removed line %d", row)
        return CommandOutcome(command, True, cursor)

    cursor = editor.get_cursor()
    result = transition_text(editor.get_line(cursor.line), command, clock)
    if result.changed:
        editor.set_line(cursor.line, result.text)
        editor.set_cursor(cursor)
        log.debug("%s rewrote line %d", command.value, cursor.line)
    return CommandOutcome(command, result.changed, editor.get_cursor())
