"""In-memory document implementing the Editor protocol."""

from pathlib import Path
from typing import List, Optional

from todo_plus.editor.ports import Position


class TextBuffer:
    """
    A document held as a list of lines plus a cursor.

    Positions past the end of a line or of the document are clamped, the way
    editors treat them. Row lookups for get_line/set_line are strict and raise
    IndexError, so callers notice when they address a line that is not there.
    """

    def __init__(self, lines: Optional[List[str]] = None, newline: str = "\n"):
        self.lines: List[str] = list(lines) if lines else [""]
        self.newline = newline
        self.cursor = Position(0, 0)

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        # A document is written back with one line ending; mixed input is
        # split on both and stray "\r" never stays inside a line
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(text.replace("\r\n", "\n").split("\n"), newline=newline)

    @classmethod
    def from_file(cls, file_path: Path) -> "TextBuffer":
        # newline="" so \r\n reaches from_text untranslated
        with open(file_path, encoding="utf-8", newline="") as f:
            return cls.from_text(f.read())

    def to_text(self) -> str:
        return self.newline.join(self.lines)

    def write(self, file_path: Path) -> None:
        # newline="" keeps \r\n documents from gaining extra carriage returns
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(self.to_text())

    # --- Editor protocol ---

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self.lines):
            raise IndexError(f"Line {row} out of range (document has {len(self.lines)} lines)")

    def get_line(self, row: int) -> str:
        self._check_row(row)
        return self.lines[row]

    def set_line(self, row: int, text: str) -> None:
        self._check_row(row)
        self.lines[row] = text

    def line_count(self) -> int:
        return len(self.lines)

    def clamp(self, position: Position) -> Position:
        if position.line >= len(self.lines):
            last = len(self.lines) - 1
            return Position(last, len(self.lines[last]))
        line = max(position.line, 0)
        ch = min(max(position.ch, 0), len(self.lines[line]))
        return Position(line, ch)

    def _offset(self, position: Position) -> int:
        position = self.clamp(position)
        # Offsets count a single "\n" per line break; lines are re-split on "\n"
        return sum(len(l) + 1 for l in self.lines[:position.line]) + position.ch

    def replace_range(self, text: str, start: Position, end: Optional[Position] = None) -> None:
        joined = "\n".join(self.lines)
        begin = self._offset(start)
        finish = self._offset(end) if end is not None else begin
        if finish < begin:
            begin, finish = finish, begin
        self.lines = (joined[:begin] + text + joined[finish:]).split("\n")

    def get_cursor(self) -> Position:
        return self.cursor

    def set_cursor(self, position: Position) -> None:
        self.cursor = self.clamp(position)
