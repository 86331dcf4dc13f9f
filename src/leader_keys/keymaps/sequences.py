"""Equality, prefix and display ordering over hotkey sequences."""

from __future__ import annotations

from typing import Optional, Sequence

from .models import Hotkey
from .normalizer import format_hotkey


def hotkeys_equal(h1: Hotkey, h2: Hotkey) -> bool:
    return h1.key == h2.key and h1.modifiers == h2.modifiers


def sequences_equal(s1: Sequence[Hotkey], s2: Sequence[Hotkey]) -> bool:
    if len(s1) != len(s2):
        return False
    return all(hotkeys_equal(a, b) for a, b in zip(s1, s2))


def is_prefix(prefix: Sequence[Hotkey], full: Sequence[Hotkey]) -> bool:
    """True when every hotkey of ``prefix`` matches ``full`` at the same index."""

    if len(prefix) > len(full):
        return False
    return all(hotkeys_equal(a, b) for a, b in zip(prefix, full))


def format_sequence(seq: Sequence[Hotkey], *, platform: Optional[str] = None) -> str:
    return " ".join(format_hotkey(hotkey, platform=platform) for hotkey in seq)


def display_sort_key(seq: Sequence[Hotkey]) -> tuple[int, str]:
    # Platform-independent so table order does not depend on the host.
    return (len(seq), format_sequence(seq, platform="linux"))


__all__ = [
    "display_sort_key",
    "format_sequence",
    "hotkeys_equal",
    "is_prefix",
    "sequences_equal",
]
