from .transitions import (
    Command,
    TransitionResult,
    cycle,
    toggle_cancelled,
    toggle_done,
    toggle_started,
    transition,
    transition_text,
)

__all__ = [
    "Command",
    "TransitionResult",
    "cycle",
    "toggle_done",
    "toggle_cancelled",
    "toggle_started",
    "transition",
    "transition_text",
]
