"""
Editor collaborator interface.

The engine never touches a document directly. Hosts hand it something that
satisfies the Editor protocol: an editor plugin API, or the in-memory
TextBuffer used by the CLI, the REST API and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Position:
    """A zero-based (line, column) position in a document."""

    line: int
    ch: int = 0

    def to_dict(self) -> dict:
        return {"line": self.line, "ch": self.ch}


class Editor(Protocol):
    def get_line(self, row: int) -> str: ...
    def set_line(self, row: int, text: str) -> None: ...
    def line_count(self) -> int: ...

    def replace_range(self, text: str, start: Position, end: Optional[Position] = None) -> None:
        """Replace the text between start and end (an insert when end is None)."""
        ...

    def get_cursor(self) -> Position: ...
    def set_cursor(self, position: Position) -> None: ...
