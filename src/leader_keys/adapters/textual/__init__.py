"""Textual adapter wiring the leader state machine into a Textual app."""

from .controller import (
    TERMINAL_PLATFORM,
    TextualLeaderAdapter,
    TextualUIHooks,
    textual_key_event,
)

__all__ = [
    "TERMINAL_PLATFORM",
    "TextualLeaderAdapter",
    "TextualUIHooks",
    "textual_key_event",
]
