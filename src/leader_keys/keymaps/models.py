"""Dataclasses describing hotkeys, trigger sequences and mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from leader_keys.actions.models import Action

PRIMARY_MODIFIER = "Mod"

# Display priority; lower sorts first.
MODIFIER_ORDER: dict[str, int] = {
    PRIMARY_MODIFIER: 1,
    "Ctrl": 2,
    "Meta": 3,
    "Alt": 4,
    "Shift": 5,
}

SPACE = "SPACE"


def canonical_key(key: str) -> str:
    """Upper-case a key label; a literal space and any spelling of Space become ``SPACE``."""

    if key == " " or key.upper() == SPACE:
        return SPACE
    return key.upper()


def _normalize_modifiers(modifiers: Iterable[str]) -> frozenset[str]:
    values = frozenset(m.strip() for m in modifiers if m and m.strip())
    unknown = values - set(MODIFIER_ORDER)
    if unknown:
        raise ValueError(f"Unknown modifiers: {sorted(unknown)}")
    return values


@dataclass(frozen=True, slots=True)
class Hotkey:
    """Single canonical key press: an unordered modifier set plus a key label."""

    key: str
    modifiers: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", canonical_key(self.key))
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @classmethod
    def of(cls, key: str, *modifiers: str) -> "Hotkey":
        return cls(key=key, modifiers=frozenset(modifiers))

    @property
    def ordered_modifiers(self) -> tuple[str, ...]:
        return tuple(sorted(self.modifiers, key=MODIFIER_ORDER.__getitem__))


KeySequence = Tuple[Hotkey, ...]


@dataclass(frozen=True, slots=True)
class Mapping:
    """Associates a trigger sequence with an ordered action chain."""

    trigger: KeySequence
    actions: tuple[Action, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "trigger", tuple(self.trigger))
        object.__setattr__(self, "actions", tuple(self.actions))
        if not self.trigger:
            raise ValueError("Trigger sequence cannot be empty")
        if not self.actions:
            raise ValueError("Action chain cannot be empty")


__all__ = [
    "Hotkey",
    "KeySequence",
    "Mapping",
    "MODIFIER_ORDER",
    "PRIMARY_MODIFIER",
    "SPACE",
    "canonical_key",
]
