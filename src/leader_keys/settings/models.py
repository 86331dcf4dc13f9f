"""Leader configuration and the mapping table it owns."""

from __future__ import annotations

from dataclasses import dataclass, field

from leader_keys.keymaps import Hotkey, MappingTable, PRIMARY_MODIFIER, SPACE

DEFAULT_LEADER_KEY = Hotkey(key=SPACE, modifiers=frozenset({PRIMARY_MODIFIER}))
DEFAULT_TIMEOUT_MS = 2000
DEFAULT_MULTI_KEY_TIMEOUT_MS = 500


class SettingsError(ValueError):
    """Raised when settings are malformed or out of range."""


@dataclass(frozen=True, slots=True)
class LeaderConfig:
    """Immutable per-session snapshot of the timing and chord settings."""

    leader_key: Hotkey
    timeout_ms: int
    multi_key_timeout_ms: int


@dataclass(slots=True)
class LeaderSettings:
    leader_key: Hotkey = DEFAULT_LEADER_KEY
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    multi_key_timeout_ms: int = DEFAULT_MULTI_KEY_TIMEOUT_MS
    table: MappingTable = field(default_factory=MappingTable)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.timeout_ms <= 0:
            raise SettingsError("timeout must be a positive number of milliseconds")
        if self.multi_key_timeout_ms <= 0:
            raise SettingsError(
                "multiKeyTimeout must be a positive number of milliseconds"
            )

    def snapshot(self) -> LeaderConfig:
        self.validate()
        return LeaderConfig(
            leader_key=self.leader_key,
            timeout_ms=self.timeout_ms,
            multi_key_timeout_ms=self.multi_key_timeout_ms,
        )


__all__ = [
    "DEFAULT_LEADER_KEY",
    "DEFAULT_MULTI_KEY_TIMEOUT_MS",
    "DEFAULT_TIMEOUT_MS",
    "LeaderConfig",
    "LeaderSettings",
    "SettingsError",
]
