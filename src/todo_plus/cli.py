#!/usr/bin/env python3
"""
todo-plus - command line interface for task lines

Usage:
    todo-plus line <command> <text>
    todo-plus apply <command> --file <path> --line <n> [--column <c>]
    todo-plus duration <ms>
    todo-plus commands

Commands:
    cycle-status, set-done, set-cancelled, toggle-started, new-task, remove-line
    (plugin ids such as todo-toggle-done are accepted too)

Environment:
    TODO_PLUS_HOTKEYS  custom bindings for "commands", e.g. "todo-toggle-done=Ctrl+K"

Examples:
    todo-plus line set-done "☐ Buy milk"
    todo-plus --now "2024-01-01 10:05" apply set-done --file TODO.md --line 3
    todo-plus apply todo-new-task --file TODO.md --line 3
    todo-plus duration 5400000
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from todo_plus.commands import COMMANDS, bind_default_hotkeys, parse_bindings, resolve_command
from todo_plus.editor.actions import run_command
from todo_plus.editor.buffer import TextBuffer
from todo_plus.editor.ports import Position
from todo_plus.engine.transitions import Command, LINE_TRANSITIONS, transition_text
from todo_plus.utils.dates import fixed_clock, format_duration, parse_timestamp, system_clock

log = logging.getLogger(__name__)


def _fail(message: str) -> None:
    print(f"Error: {message}")
    sys.exit(1)


# --- line ---

def line_cmd(args):
    """Transform a single line and print it."""
    result = transition_text(args.text, resolve_command(args.command_id), args.clock)
    if not result.is_task:
        log.info("Not a task line, left unchanged")
    print(result.text)


# --- apply ---

def apply_cmd(args):
    """Run a command against a line of a file and write the file back."""
    target = Path(args.file)
    if not target.is_file():
        _fail(f"File not found: {target}")

    buffer = TextBuffer.from_file(target)
    if not 0 <= args.line < buffer.line_count():
        _fail(f"Line {args.line} out of range ({target} has {buffer.line_count()} lines)")

    buffer.set_cursor(Position(args.line, args.column))
    outcome = run_command(buffer, resolve_command(args.command_id), args.clock)

    if not outcome.changed:
        print("No changes made.")
        return

    buffer.write(target)
    print(f"Updated: {target}")
    print(f"  Cursor: {outcome.cursor.line}:{outcome.cursor.ch}")
    if outcome.command in LINE_TRANSITIONS:
        print(f"  Line: {buffer.get_line(outcome.cursor.line)}")


# --- duration ---

def duration_cmd(args):
    print(format_duration(args.ms))


# --- commands ---

def commands_cmd(args):
    try:
        bindings = bind_default_hotkeys(parse_bindings(os.environ.get("TODO_PLUS_HOTKEYS", "")))
    except ValueError as e:
        _fail(f"TODO_PLUS_HOTKEYS: {e}")
    for spec in COMMANDS:
        hotkeys = ", ".join(str(h) for h in bindings[spec.id]) or "-"
        print(f"{spec.command.value:<16} {spec.id:<24} {hotkeys:<10} {spec.name}")


# --- main ---

def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Toggle, start and insert plain-text task lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--now', help='Freeze the clock (YYYY-MM-DD HH:MM)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    command_ids = [c.value for c in Command] + [spec.id for spec in COMMANDS]
    line_ids = [
        *(c.value for c in LINE_TRANSITIONS),
        *(spec.id for spec in COMMANDS if spec.command in LINE_TRANSITIONS),
    ]

    # --- line ---
    line_p = subparsers.add_parser('line', help='Transform a single line of text')
    line_p.add_argument('command_id', choices=line_ids, help='Transition to apply')
    line_p.add_argument('text', help='The line, e.g. "☐ Buy milk"')
    line_p.set_defaults(func=line_cmd)

    # --- apply ---
    apply_p = subparsers.add_parser('apply', help='Run a command against a file')
    apply_p.add_argument('command_id', choices=command_ids, help='Command to run')
    apply_p.add_argument('--file', required=True, help='Path to the document')
    apply_p.add_argument('--line', type=int, required=True, help='Zero-based line number')
    apply_p.add_argument('--column', type=int, default=0, help='Zero-based cursor column')
    apply_p.set_defaults(func=apply_cmd)

    # --- duration ---
    duration_p = subparsers.add_parser('duration', help='Format milliseconds as a duration')
    duration_p.add_argument('ms', type=int, help='Duration in milliseconds')
    duration_p.set_defaults(func=duration_cmd)

    # --- commands ---
    commands_p = subparsers.add_parser('commands', help='List commands and their hotkeys')
    commands_p.set_defaults(func=commands_cmd)

    # Parse and dispatch
    args = parser.parse_args(argv)
    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.now:
        moment = parse_timestamp(args.now)
        if moment is None:
            _fail(f"Could not parse --now '{args.now}' (expected YYYY-MM-DD HH:MM)")
        args.clock = fixed_clock(moment)
    else:
        args.clock = system_clock

    args.func(args)


if __name__ == '__main__':
    main()
