"""
Task line state transitions.

Every transition is a pure function TaskLine → TaskLine (or None when the
transition does not apply). transition_text() wraps them for callers that
work on raw text: it parses, transitions and re-renders, and hands back the
input untouched whenever nothing applies.

State machine (status × command):

    cycle-status    open → done → cancelled → open
    set-done        done ↔ open, anything else → done
    set-cancelled   cancelled ↔ open, anything else → cancelled
    toggle-started  open only, and only without a @done tag
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional

from todo_plus.models.task_line import (
    CANCELLED,
    COMPLETION_TAGS,
    DONE,
    LASTED,
    STARTED,
    STATUS_DECORATION,
    TIME_TAGS,
    WASTED,
    TaskLine,
    TaskStatus,
)
from todo_plus.parsers.line_parser import has_unclosed_tag, parse_line
from todo_plus.utils.dates import Clock, elapsed_since, format_timestamp, system_clock
from todo_plus.utils.formatting import render_line

log = logging.getLogger(__name__)


class Command(str, Enum):
    CYCLE_STATUS = "cycle-status"
    SET_DONE = "set-done"
    SET_CANCELLED = "set-cancelled"
    TOGGLE_STARTED = "toggle-started"
    NEW_TASK = "new-task"
    REMOVE_LINE = "remove-line"

    @classmethod
    def parse(cls, value) -> "Command":
        """Look up a command by its id, raising ValueError for unknown ids."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown command '{value}' (expected one of: {known})") from None


# Which tag records the moment of completion, and which the elapsed time
_COMPLETION = {
    TaskStatus.DONE: (DONE, LASTED),
    TaskStatus.CANCELLED: (CANCELLED, WASTED),
}


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def close(line: TaskLine, status: TaskStatus, now: datetime) -> TaskLine:
    """
    Mark a line done or cancelled at the given moment.

    Prior completion tags are discarded. A started tag is kept and, when its
    timestamp parses, the elapsed time is recorded alongside the completion
    stamp (@lasted for done, @wasted for cancelled).
    """
    stamp_tag, span_tag = _COMPLETION[status]

    tags: Dict[str, str] = line.without_tags(*COMPLETION_TAGS)
    tags[stamp_tag] = format_timestamp(now)

    span = elapsed_since(line.started, now)
    if span is not None:
        tags[span_tag] = span
    elif line.started is not None:
        log.debug("Ignoring unparseable @started(%s)", line.started)

    return line.evolve(status=status, tags=tags, decoration=STATUS_DECORATION[status])


def reopen(line: TaskLine) -> TaskLine:
    """Back to open: markup and completion tags go, @started stays."""
    return line.evolve(
        status=TaskStatus.OPEN,
        tags=line.without_tags(*COMPLETION_TAGS),
        decoration=STATUS_DECORATION[TaskStatus.OPEN],
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def cycle(line: TaskLine, now: datetime) -> TaskLine:
    if line.status is TaskStatus.OPEN:
        return close(line, TaskStatus.DONE, now)
    if line.status is TaskStatus.DONE:
        return close(line, TaskStatus.CANCELLED, now)
    return reopen(line)


def toggle(line: TaskLine, target: TaskStatus, now: datetime) -> TaskLine:
    """Toggle a line into the target status, or back to open if already there."""
    if line.status is target:
        return reopen(line)
    return close(line, target, now)


def toggle_done(line: TaskLine, now: datetime) -> TaskLine:
    return toggle(line, TaskStatus.DONE, now)


def toggle_cancelled(line: TaskLine, now: datetime) -> TaskLine:
    return toggle(line, TaskStatus.CANCELLED, now)


def toggle_started(line: TaskLine, now: datetime) -> Optional[TaskLine]:
    """
    Start or un-start an open task.

    Returns None (no change) for done and cancelled tasks, and for open lines
    that still carry a stray @done tag.
    """
    if line.status is not TaskStatus.OPEN or DONE in line.tags:
        return None

    if STARTED in line.tags:
        return line.evolve(tags=line.without_tags(STARTED))

    tags = line.without_tags(*TIME_TAGS)
    tags[STARTED] = format_timestamp(now)
    return line.evolve(tags=tags)


LineTransition = Callable[[TaskLine, datetime], Optional[TaskLine]]

LINE_TRANSITIONS: Dict[Command, LineTransition] = {
    Command.CYCLE_STATUS: cycle,
    Command.SET_DONE: toggle_done,
    Command.SET_CANCELLED: toggle_cancelled,
    Command.TOGGLE_STARTED: toggle_started,
}


# ---------------------------------------------------------------------------
# Text entry point
# ---------------------------------------------------------------------------

@dataclass
class TransitionResult:
    text: str
    changed: bool
    line: Optional[TaskLine] = None

    @property
    def is_task(self) -> bool:
        return self.line is not None


def transition(line: TaskLine, command, clock: Clock = system_clock) -> Optional[TaskLine]:
    """
    Apply a line-level command to a parsed line.

    Lines whose content holds an unclosed "@name(" are passed through: any
    tag written after that content would be read back as part of its value.

    Returns:
        The new TaskLine, or None if the command leaves the line as it is
    """
    command = Command.parse(command)
    handler = LINE_TRANSITIONS.get(command)
    if handler is None:
        raise ValueError(f"'{command.value}' does not operate on a single line")
    if has_unclosed_tag(line.content):
        log.debug("Unclosed tag in %r, leaving the line as it is", line.content)
        return None
    return handler(line, clock())


def transition_text(text: str, command, clock: Clock = system_clock) -> TransitionResult:
    """
    Parse a line, apply a command and render the result.

    Lines that are not tasks, and transitions that do not apply, come back
    unchanged with changed=False.

    Args:
        text: Raw line text (no trailing newline)
        command: A Command or its id ("set-done", ...)
        clock: Source of "now"

    Returns:
        TransitionResult with the new text
    """
    command = Command.parse(command)
    line = parse_line(text)
    if line is None:
        log.debug("Not a task line, skipping %s", command.value)
        return TransitionResult(text=text, changed=False)

    updated = transition(line, command, clock)
    if updated is None:
        log.debug("%s does not apply to a %s task", command.value, line.status.value)
        return TransitionResult(text=text, changed=False, line=line)

    new_text = render_line(updated)
    return TransitionResult(text=new_text, changed=new_text != text, line=updated)
