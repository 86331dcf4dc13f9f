"""JSON-file persistence for leader settings."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from leader_keys.keymaps import MappingTable, parse_hotkey
from leader_keys.runtime import telemetry
from leader_keys.runtime.telemetry import span

from .models import LeaderSettings, SettingsError
from .schema import settings_from_dict, settings_to_dict

DEFAULT_SETTINGS_PATH = Path("~/.config/leader-keys/settings.json")


def default_settings_path() -> Path:
    override = telemetry.env("SETTINGS_FILE")
    return Path(override or DEFAULT_SETTINGS_PATH).expanduser()


def apply_env_overrides(settings: LeaderSettings) -> LeaderSettings:
    """Apply ``LEADER_KEYS_*`` environment overrides in place."""

    leader = telemetry.env("LEADER_KEY")
    if leader:
        try:
            settings.leader_key = parse_hotkey(leader)
        except ValueError as exc:
            raise SettingsError(f"LEADER_KEYS_LEADER_KEY: {exc}") from exc
    for name, attr in (
        ("TIMEOUT_MS", "timeout_ms"),
        ("MULTI_KEY_TIMEOUT_MS", "multi_key_timeout_ms"),
    ):
        raw = telemetry.env(name)
        if raw is None:
            continue
        try:
            setattr(settings, attr, int(raw))
        except ValueError as exc:
            raise SettingsError(f"LEADER_KEYS_{name} must be an integer") from exc
    settings.validate()
    return settings


class SettingsStore:
    """Loads and saves ``LeaderSettings`` as one JSON document."""

    def __init__(
        self, path: Optional[Path] = None, *, logger_name: str | None = None
    ) -> None:
        self.path = Path(path).expanduser() if path else default_settings_path()
        self._logger_name = logger_name

    def load(self) -> LeaderSettings:
        with span(
            "settings::load",
            logger_name=self._logger_name,
            component="settings",
            metadata={"path": str(self.path)},
        ) as handle:
            if not self.path.exists():
                handle.add_metadata("status", "defaults")
                return LeaderSettings(table=MappingTable(logger_name=self._logger_name))
            try:
                payload = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise SettingsError(f"Failed to read settings {self.path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise SettingsError("Settings file must contain a JSON object.")
            settings = settings_from_dict(payload, logger_name=self._logger_name)
            handle.add_metadata("mappings", len(settings.table))
            return settings

    def save(self, settings: LeaderSettings) -> None:
        with span(
            "settings::save",
            logger_name=self._logger_name,
            component="settings",
            metadata={"path": str(self.path), "mappings": len(settings.table)},
        ):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            payload = json.dumps(
                settings_to_dict(settings), indent=2, ensure_ascii=False
            )
            try:
                tmp_path.write_text(payload, encoding="utf-8")
                os.replace(tmp_path, self.path)
            except OSError:
                tmp_path.unlink(missing_ok=True)
                raise

    def attach(self, settings: LeaderSettings) -> LeaderSettings:
        """Persist ``settings`` after every mapping-table mutation."""

        settings.table.on_change = lambda _table: self.save(settings)
        return settings


__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "SettingsStore",
    "apply_env_overrides",
    "default_settings_path",
]
