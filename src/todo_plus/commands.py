"""
Command registry and default hotkeys.

Hosts register these commands with whatever trigger mechanism they have.
Default hotkeys are applied by an explicit startup step,
bind_default_hotkeys(), which only fills in commands the user has not
customised. User bindings come in as text (see parse_bindings()).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from todo_plus.engine.transitions import Command


@dataclass(frozen=True)
class Hotkey:
    key: str
    modifiers: tuple = ()

    def __str__(self) -> str:
        return "+".join([*self.modifiers, self.key.upper() if len(self.key) == 1 else self.key])

    def to_dict(self) -> dict:
        return {"modifiers": list(self.modifiers), "key": self.key}


@dataclass(frozen=True)
class CommandSpec:
    id: str
    name: str
    command: Command
    hotkeys: List[Hotkey] = field(default_factory=list)

    def to_dict(self, hotkeys: Optional[Sequence[Hotkey]] = None) -> dict:
        """Serialize, listing the given hotkeys instead of the defaults if passed."""
        if hotkeys is None:
            hotkeys = self.hotkeys
        return {
            "id": self.id,
            "name": self.name,
            "command": self.command.value,
            "hotkeys": [str(h) for h in hotkeys],
        }


COMMANDS: List[CommandSpec] = [
    CommandSpec("todo-toggle-done", "Toggle Done (✔)", Command.SET_DONE, [Hotkey("d", ("Alt",))]),
    CommandSpec("todo-toggle-cancelled", "Toggle Cancelled (✘)", Command.SET_CANCELLED, [Hotkey("c", ("Alt",))]),
    CommandSpec("todo-toggle-started", "Toggle Started (@started)", Command.TOGGLE_STARTED, [Hotkey("a", ("Alt",))]),
    CommandSpec("todo-cycle-status", "Cycle Status (☐ → ✔ → ✘)", Command.CYCLE_STATUS, [Hotkey("x", ("Alt",))]),
    CommandSpec("todo-new-task", "New Task (☐)", Command.NEW_TASK, [Hotkey("Enter", ("Mod",))]),
    CommandSpec("todo-remove-line", "Remove Task Line", Command.REMOVE_LINE, [Hotkey("r", ("Alt",))]),
]


def find_command(key: str) -> Optional[CommandSpec]:
    """Find a registry entry by plugin id ("todo-toggle-done") or command id ("set-done")."""
    for spec in COMMANDS:
        if key in (spec.id, spec.command.value):
            return spec
    return None


def resolve_command(key: str) -> Command:
    """Turn a plugin id or a command id into a Command, raising ValueError if neither."""
    spec = find_command(key.strip())
    if spec is not None:
        return spec.command
    return Command.parse(key)


def parse_hotkey(text: str) -> Hotkey:
    """
    Parse a label such as "Alt+D" or "Mod+Enter".

    Single-character keys are stored lowercase, so parse_hotkey(str(h)) == h.
    """
    parts = [p.strip() for p in text.split("+")]
    if not all(parts):
        raise ValueError(f"Malformed hotkey '{text}'")
    *modifiers, key = parts
    if len(key) == 1:
        key = key.lower()
    return Hotkey(key, tuple(modifiers))


def parse_bindings(raw: str) -> Dict[str, List[Hotkey]]:
    """
    Parse user hotkey bindings.

    Format: entries separated by ";", each "command-id=Hotkey,Hotkey". An
    entry with nothing after "=" clears the binding, which
    bind_default_hotkeys() then fills with the defaults.

    Example: "todo-toggle-done=Ctrl+K;todo-new-task="
    """
    bindings: Dict[str, List[Hotkey]] = {}
    for entry in raw.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        command_id, sep, labels = entry.partition("=")
        if not sep or not command_id.strip():
            raise ValueError(f"Malformed binding '{entry}' (expected id=Hotkey,...)")
        bindings[command_id.strip()] = [
            parse_hotkey(label) for label in labels.split(",") if label.strip()
        ]
    return bindings


def bind_default_hotkeys(existing: Mapping[str, List[Hotkey]]) -> Dict[str, List[Hotkey]]:
    """
    Merge the default hotkeys into a host's current bindings.

    Meant to run once at host startup. Commands that already have hotkeys
    keep them; commands with no binding (missing or empty) get the defaults.
    Bindings for ids this registry does not know are carried over as-is.

    Args:
        existing: Current bindings by command id

    Returns:
        New mapping of command id to hotkeys
    """
    bindings = {key: list(value) for key, value in existing.items()}
    for spec in COMMANDS:
        if not bindings.get(spec.id):
            bindings[spec.id] = list(spec.hotkeys)
    return bindings
