"""
Tests for engine/transitions.py.

Covers:
- set-done / set-cancelled toggles, including @started → @lasted/@wasted
- cycle-status rotation and closure
- toggle-started guards
- Non-task lines, unknown tags and unclosed tags
- Round-trip: parse(render(t)) == t for every transition result
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from todo_plus.engine.transitions import (
    Command,
    cycle,
    toggle_started,
    transition,
    transition_text,
)
from todo_plus.models.task_line import TaskStatus
from todo_plus.parsers.line_parser import parse_line
from todo_plus.utils.dates import fixed_clock
from todo_plus.utils.formatting import render_line


AT_10_00 = fixed_clock(datetime(2024, 1, 1, 10, 0))
AT_10_05 = fixed_clock(datetime(2024, 1, 1, 10, 5))


def apply(text, command, clock=AT_10_00):
    return transition_text(text, command, clock).text


# ---------------------------------------------------------------------------
# set-done
# ---------------------------------------------------------------------------

class TestSetDone:
    def test_open_to_done(self):
        assert apply("☐ Buy milk", "set-done") == "✔ ~~Buy milk~~ @done(2024-01-01 10:00)"

    def test_with_started_records_lasted(self):
        result = apply("☐ Buy milk @started(2024-01-01 09:30)", "set-done", AT_10_05)
        assert result == (
            "✔ ~~Buy milk~~ @started(2024-01-01 09:30) @done(2024-01-01 10:05) @lasted(35m)"
        )

    def test_toggle_off(self):
        assert apply("✔ ~~Buy milk~~ @done(2024-01-01 10:00)", "set-done") == "☐ Buy milk"

    def test_toggle_off_keeps_started(self):
        text = "✔ ~~Buy milk~~ @started(2024-01-01 09:30) @done(2024-01-01 10:05) @lasted(35m)"
        assert apply(text, "set-done") == "☐ Buy milk @started(2024-01-01 09:30)"

    def test_cancelled_to_done(self):
        text = "✘ _Buy milk_ @started(2024-01-01 09:00) @cancelled(2024-01-01 09:10) @wasted(10m)"
        assert apply(text, "set-done", AT_10_05) == (
            "✔ ~~Buy milk~~ @started(2024-01-01 09:00) @done(2024-01-01 10:05) @lasted(1h5m)"
        )

    def test_malformed_started_skips_lasted(self):
        result = apply("☐ Buy milk @started(soon)", "set-done")
        assert result == "✔ ~~Buy milk~~ @started(soon) @done(2024-01-01 10:00)"

    def test_stale_tags_replaced(self):
        result = apply("☐ Buy milk @done(x) @lasted(9h) @wasted(1m)", "set-done")
        assert result == "✔ ~~Buy milk~~ @done(2024-01-01 10:00)"

    def test_idempotent_at_same_instant(self):
        once = apply("☐ Buy milk", "set-done")
        reapplied = apply(apply(once, "set-done"), "set-done")
        assert reapplied == once


# ---------------------------------------------------------------------------
# set-cancelled
# ---------------------------------------------------------------------------

class TestSetCancelled:
    def test_open_to_cancelled(self):
        assert apply("☐ Buy milk", "set-cancelled") == "✘ _Buy milk_ @cancelled(2024-01-01 10:00)"

    def test_with_started_records_wasted(self):
        result = apply("☐ Buy milk @started(2024-01-01 08:00)", "set-cancelled", AT_10_05)
        assert result == (
            "✘ _Buy milk_ @started(2024-01-01 08:00) @cancelled(2024-01-01 10:05) @wasted(2h5m)"
        )

    def test_done_to_cancelled_drops_done_and_lasted(self):
        text = "✔ ~~Buy milk~~ @started(2024-01-01 09:30) @done(2024-01-01 09:45) @lasted(15m)"
        assert apply(text, "set-cancelled", AT_10_05) == (
            "✘ _Buy milk_ @started(2024-01-01 09:30) @cancelled(2024-01-01 10:05) @wasted(35m)"
        )

    def test_toggle_off(self):
        text = "✘ _Buy milk_ @started(2024-01-01 09:30) @cancelled(2024-01-01 10:00) @wasted(30m)"
        assert apply(text, "set-cancelled") == "☐ Buy milk @started(2024-01-01 09:30)"


# ---------------------------------------------------------------------------
# cycle-status
# ---------------------------------------------------------------------------

class TestCycle:
    def test_rotation(self):
        done = apply("☐ Buy milk", "cycle-status")
        assert done == "✔ ~~Buy milk~~ @done(2024-01-01 10:00)"

        cancelled = apply(done, "cycle-status", AT_10_05)
        assert cancelled == "✘ _Buy milk_ @cancelled(2024-01-01 10:05)"

        assert apply(cancelled, "cycle-status") == "☐ Buy milk"

    def test_closure(self):
        start = parse_line("☐ Buy milk @who(Ann)")
        line = start
        for _ in range(3):
            line = cycle(line, datetime(2024, 1, 1, 10, 0))
        assert line.status is start.status
        assert line.tags == start.tags
        assert line.content == start.content

    def test_started_survives_full_cycle(self):
        text = "☐ Buy milk @started(2024-01-01 09:30)"
        for _ in range(3):
            text = apply(text, "cycle-status", AT_10_05)
        assert text == "☐ Buy milk @started(2024-01-01 09:30)"

    def test_done_to_cancelled_with_started(self):
        text = "✔ ~~Buy milk~~ @started(2024-01-01 09:30) @done(2024-01-01 09:50) @lasted(20m)"
        assert apply(text, "cycle-status", AT_10_05) == (
            "✘ _Buy milk_ @started(2024-01-01 09:30) @cancelled(2024-01-01 10:05) @wasted(35m)"
        )


# ---------------------------------------------------------------------------
# toggle-started
# ---------------------------------------------------------------------------

class TestToggleStarted:
    def test_start(self):
        assert apply("☐ Buy milk", "toggle-started") == "☐ Buy milk @started(2024-01-01 10:00)"

    def test_unstart(self):
        assert apply("☐ Buy milk @started(2024-01-01 09:00)", "toggle-started") == "☐ Buy milk"

    def test_blocked_by_stray_done_tag(self):
        result = transition_text("☐ Buy milk @done(x)", "toggle-started", AT_10_00)
        assert result.text == "☐ Buy milk @done(x)"
        assert not result.changed

    @pytest.mark.parametrize("text", [
        "✔ ~~Buy milk~~ @done(2024-01-01 10:00)",
        "✘ _Buy milk_ @cancelled(2024-01-01 10:00)",
    ])
    def test_closed_tasks_untouched(self, text):
        assert toggle_started(parse_line(text), datetime(2024, 1, 1, 10, 0)) is None
        assert apply(text, "toggle-started") == text

    def test_stale_tags_cleared(self):
        result = apply("☐ Buy milk @cancelled(x) @wasted(3m) @who(Ann)", "toggle-started")
        assert result == "☐ Buy milk @started(2024-01-01 10:00) @who(Ann)"

    def test_content_left_as_is(self):
        result = apply("  ☐ ~~odd~~ line", "toggle-started")
        assert result == "  ☐ ~~odd~~ line @started(2024-01-01 10:00)"


# ---------------------------------------------------------------------------
# Non-task lines, other tags, commands
# ---------------------------------------------------------------------------

class TestGeneral:
    @pytest.mark.parametrize("command", ["cycle-status", "set-done", "set-cancelled", "toggle-started"])
    def test_non_task_noop(self, command):
        result = transition_text("Just a note  ", command, AT_10_00)
        assert result.text == "Just a note  "
        assert not result.changed
        assert not result.is_task

    def test_unknown_tags_preserved(self):
        text = "☐ Call Ann @due(2024-02-01) @who(Ann)"
        done = apply(text, "set-done")
        assert done == "✔ ~~Call Ann~~ @done(2024-01-01 10:00) @due(2024-02-01) @who(Ann)"
        assert apply(done, "set-done") == "☐ Call Ann @due(2024-02-01) @who(Ann)"

    def test_indent_preserved(self):
        assert apply("    ☐ Sub item", "set-done") == "    ✔ ~~Sub item~~ @done(2024-01-01 10:00)"

    def test_command_enum_accepted(self):
        assert apply("☐ Buy milk", Command.SET_DONE) == "✔ ~~Buy milk~~ @done(2024-01-01 10:00)"

    def test_unknown_command(self):
        with pytest.raises(ValueError, match="Unknown command"):
            transition_text("☐ Buy milk", "explode", AT_10_00)

    def test_document_command_rejected_for_lines(self):
        with pytest.raises(ValueError):
            transition(parse_line("☐ Buy milk"), "new-task", AT_10_00)

    def test_changed_flag(self):
        assert transition_text("☐ Buy milk", "set-done", AT_10_00).changed
        assert transition_text("☐ Buy milk", "set-done", AT_10_00).line.status is TaskStatus.DONE

    @pytest.mark.parametrize("command", ["cycle-status", "set-done", "set-cancelled", "toggle-started"])
    def test_unclosed_tag_left_alone(self, command):
        text = "☐ Email @bob( re: invoice"
        result = transition_text(text, command, AT_10_00)
        assert result.text == text
        assert not result.changed
        assert result.is_task

    def test_glyph_inside_markup_dropped(self):
        assert apply("✘ _✔ x_", "cycle-status") == "☐ x"


# ---------------------------------------------------------------------------
# Round-trip
# ---------------------------------------------------------------------------

ROUND_TRIP_LINES = [
    "☐ Buy milk",
    "☐ Buy milk @started(2024-01-01 09:30)",
    "✔ ~~Buy milk~~ @started(2024-01-01 09:30) @done(2024-01-01 09:50) @lasted(20m)",
    "✘ _Buy milk_ @cancelled(2024-01-01 09:50) @who(Ann)",
    "\t☐ Nested @note(see (draft)",
    "☐ ",
    "☐ _emphasised_ idea",
    "☐ Email @bob( re: invoice",
    "✘ _✔ x_",
]


class TestRoundTrip:
    @pytest.mark.parametrize("text", ROUND_TRIP_LINES)
    @pytest.mark.parametrize("command", ["cycle-status", "set-done", "set-cancelled", "toggle-started"])
    def test_parse_render_parse(self, text, command):
        line = parse_line(text)
        result = transition(line, command, AT_10_05)
        if result is None:
            return
        assert parse_line(render_line(result)) == result
