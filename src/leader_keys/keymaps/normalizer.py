"""Convert raw key presses into canonical ``Hotkey`` values."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional

from .models import MODIFIER_ORDER, PRIMARY_MODIFIER, SPACE, Hotkey

NON_KEY = None

MODIFIER_KEYS = frozenset(
    {"Control", "Shift", "Alt", "Meta", "Hyper", "Super", "CapsLock"}
)

_MODIFIER_ALIASES = {
    "mod": PRIMARY_MODIFIER,
    "primary": PRIMARY_MODIFIER,
    "cmd": PRIMARY_MODIFIER,
    "command": PRIMARY_MODIFIER,
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "meta": "Meta",
    "alt": "Alt",
    "option": "Alt",
    "shift": "Shift",
}

_MAC_SYMBOLS = {PRIMARY_MODIFIER: "⌘", "Shift": "⇧", "Alt": "⌥"}


@dataclass(frozen=True, slots=True)
class RawKeyEvent:
    """Key press as reported by a host, before canonicalization."""

    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False


def is_apple_platform(platform: Optional[str] = None) -> bool:
    return (platform or sys.platform) == "darwin"


def normalize(
    event: RawKeyEvent, *, platform: Optional[str] = None
) -> Optional[Hotkey]:
    """Return the canonical hotkey for ``event`` or ``NON_KEY`` for a bare modifier."""

    if event.key in MODIFIER_KEYS:
        return NON_KEY
    if not event.key:
        raise ValueError("key event carries no key")

    modifiers = set()
    if event.ctrl:
        modifiers.add("Ctrl")
    if event.meta:
        modifiers.add("Meta")
    if event.alt:
        modifiers.add("Alt")
    if event.shift:
        modifiers.add("Shift")

    primary = "Meta" if is_apple_platform(platform) else "Ctrl"
    if primary in modifiers:
        modifiers.discard("Ctrl")
        modifiers.discard("Meta")
        modifiers.add(PRIMARY_MODIFIER)

    return Hotkey(key=event.key, modifiers=frozenset(modifiers))


def parse_hotkey(text: str) -> Hotkey:
    """Parse ``"Mod+Space"``, ``"Mod + K"`` or ``"ctrl+shift+p"``."""

    raw = text.strip()
    if not raw:
        raise ValueError("hotkey text cannot be empty")
    # "Mod++" binds the plus key itself.
    if raw.endswith("++"):
        parts = [part.strip() for part in raw[:-2].split("+")] + ["+"]
    elif raw == "+":
        parts = ["+"]
    else:
        parts = [part.strip() for part in raw.split("+")]
    *modifier_parts, key = parts
    if not key:
        raise ValueError(f"hotkey '{text}' has no key")

    modifiers = set()
    for part in modifier_parts:
        name = _MODIFIER_ALIASES.get(part.lower())
        if name is None:
            raise ValueError(f"Unknown modifier '{part}' in hotkey '{text}'")
        modifiers.add(name)
    return Hotkey(key=key, modifiers=frozenset(modifiers))


def format_hotkey(hotkey: Hotkey, *, platform: Optional[str] = None) -> str:
    parts = list(hotkey.ordered_modifiers)
    if is_apple_platform(platform):
        parts = [_MAC_SYMBOLS.get(part, part) for part in parts]
    parts.append("Space" if hotkey.key == SPACE else hotkey.key)
    return " + ".join(parts)


__all__ = [
    "NON_KEY",
    "MODIFIER_KEYS",
    "MODIFIER_ORDER",
    "RawKeyEvent",
    "format_hotkey",
    "is_apple_platform",
    "normalize",
    "parse_hotkey",
]
