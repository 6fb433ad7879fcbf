"""
Task line tool handlers.

Core logic lives in handle_* functions (return dicts).
MCP wrappers in register_line_tools() serialize to JSON strings.
The REST API calls the same handlers.
"""

import json
import logging
from typing import Dict, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from todo_plus.commands import COMMANDS, Hotkey, bind_default_hotkeys, resolve_command
from todo_plus.editor.actions import run_command
from todo_plus.editor.buffer import TextBuffer
from todo_plus.editor.ports import Position
from todo_plus.engine.transitions import Command, transition_text
from todo_plus.models.task_line import TaskLine
from todo_plus.parsers.line_parser import parse_line
from todo_plus.utils.dates import Clock, fixed_clock, format_duration, parse_timestamp, system_clock
from todo_plus.utils.formatting import ordered_tag_names

log = logging.getLogger(__name__)


def _line_to_dict(line: TaskLine) -> dict:
    """Serialize a TaskLine to a JSON-serializable dict."""
    return {
        "is_task": True,
        "status": line.status.value,
        "glyph": line.glyph,
        "content": line.content,
        "decoration": line.decoration.value,
        "indent": line.indent,
        "tags": {name: line.tags[name] for name in ordered_tag_names(line.tags)},
    }


def _resolve_clock(now: Optional[str], clock: Clock) -> Clock:
    """A frozen clock when the caller pins "now", else the default one."""
    if not now:
        return clock
    moment = parse_timestamp(now)
    if moment is None:
        raise ValueError(f"Could not parse now '{now}' (expected YYYY-MM-DD HH:MM)")
    return fixed_clock(moment)


# ---------------------------------------------------------------------------
# Handler functions (return dicts, shared by MCP tools and REST API)
# ---------------------------------------------------------------------------


def handle_line_parse(*, text: str) -> dict:
    line = parse_line(text)
    if line is None:
        return {"is_task": False}
    return _line_to_dict(line)


def handle_line_transition(
    *,
    text: str,
    command: str,
    now: Optional[str] = None,
    clock: Clock = system_clock,
) -> dict:
    try:
        cmd = resolve_command(command)
        if cmd in (Command.NEW_TASK, Command.REMOVE_LINE):
            return {"error": f"'{cmd.value}' works on documents, use document_command"}
        result = transition_text(text, cmd, _resolve_clock(now, clock))
    except ValueError as e:
        return {"error": str(e)}

    return {
        "text": result.text,
        "changed": result.changed,
        "is_task": result.is_task,
    }


def handle_document_command(
    *,
    text: str,
    command: str,
    line: int,
    column: int = 0,
    now: Optional[str] = None,
    clock: Clock = system_clock,
) -> dict:
    buffer = TextBuffer.from_text(text)
    try:
        if not 0 <= line < buffer.line_count():
            raise IndexError(f"Line {line} out of range (document has {buffer.line_count()} lines)")
        buffer.set_cursor(Position(line, column))
        outcome = run_command(buffer, resolve_command(command), _resolve_clock(now, clock))
    except (ValueError, IndexError) as e:
        return {"error": str(e)}

    log.info("%s at line %d (changed=%s)", outcome.command.value, line, outcome.changed)
    return {
        "text": buffer.to_text(),
        "changed": outcome.changed,
        "cursor": outcome.cursor.to_dict(),
    }


def handle_duration(*, ms: int) -> dict:
    return {"ms": ms, "duration": format_duration(ms)}


def handle_command_list(bindings: Optional[Mapping[str, List[Hotkey]]] = None) -> list[dict]:
    """List commands with the hotkeys bound to them (the defaults if no bindings are given)."""
    if bindings is None:
        bindings = bind_default_hotkeys({})
    return [spec.to_dict(bindings.get(spec.id, spec.hotkeys)) for spec in COMMANDS]


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_line_tools(
    mcp: FastMCP,
    clock: Clock = system_clock,
    bindings: Optional[Dict[str, List[Hotkey]]] = None,
) -> None:
    """Register all task line tools on the MCP server."""

    @mcp.tool()
    def line_parse(text: str) -> str:
        """
        Parse a single line into its status, content and tags.

        Args:
            text: The line, e.g. "☐ Buy milk @started(2024-01-01 09:30)"

        Returns:
            JSON object; "is_task" is false for lines without a status glyph
        """
        return json.dumps(handle_line_parse(text=text), indent=2, ensure_ascii=False)

    @mcp.tool()
    def line_transition(text: str, command: str, now: Optional[str] = None) -> str:
        """
        Apply a status command to a single task line.

        Args:
            text: The line to transform
            command: "cycle-status", "set-done", "set-cancelled" or "toggle-started",
                or the matching plugin id ("todo-toggle-done", ...)
            now: Optional timestamp (YYYY-MM-DD HH:MM) to use instead of the clock

        Returns:
            JSON with the new "text" and whether it "changed"
        """
        return json.dumps(
            handle_line_transition(text=text, command=command, now=now, clock=clock),
            indent=2,
            ensure_ascii=False,
        )

    @mcp.tool()
    def document_command(
        text: str,
        command: str,
        line: int,
        column: int = 0,
        now: Optional[str] = None,
    ) -> str:
        """
        Run a command against one line of a whole document.

        Supports every command, including "new-task" (insert a ☐ stub) and
        "remove-line".

        Args:
            text: Full document text
            command: Command id or plugin id ("todo-new-task", ...)
            line: Zero-based line the cursor is on
            column: Zero-based cursor column
            now: Optional timestamp (YYYY-MM-DD HH:MM) to use instead of the clock

        Returns:
            JSON with the new document "text", "changed" and the new "cursor"
        """
        return json.dumps(
            handle_document_command(
                text=text,
                command=command,
                line=line,
                column=column,
                now=now,
                clock=clock,
            ),
            indent=2,
            ensure_ascii=False,
        )

    @mcp.tool()
    def duration_format(ms: int) -> str:
        """
        Format a millisecond span the way @lasted/@wasted tags store it.

        Args:
            ms: Duration in milliseconds

        Returns:
            JSON with the formatted "duration" (e.g. "1h30m")
        """
        return json.dumps(handle_duration(ms=ms), indent=2)

    @mcp.tool()
    def command_list() -> str:
        """
        List the available commands with their bound hotkeys.

        Returns:
            JSON array of commands
        """
        return json.dumps(handle_command_list(bindings), indent=2, ensure_ascii=False)
