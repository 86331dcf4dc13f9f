"""JSON schema for persisted settings, including migration of older shapes."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping as MappingType

from leader_keys.actions import action_from_dict, action_to_dict
from leader_keys.keymaps import (
    Hotkey,
    Mapping,
    MappingTable,
    format_sequence,
    sequences_equal,
)
from leader_keys.runtime import telemetry

from .models import (
    DEFAULT_LEADER_KEY,
    DEFAULT_MULTI_KEY_TIMEOUT_MS,
    DEFAULT_TIMEOUT_MS,
    LeaderSettings,
    SettingsError,
)

SCHEMA_VERSION = 2


def hotkey_from_dict(data: Any) -> Hotkey:
    if not isinstance(data, MappingType):
        raise SettingsError(f"hotkey must be an object, got {data!r}")
    key = data.get("key")
    if not isinstance(key, str) or not key:
        raise SettingsError(f"hotkey is missing a key: {data!r}")
    modifiers = data.get("modifiers") or []
    if not isinstance(modifiers, list):
        raise SettingsError(f"hotkey modifiers must be a list: {data!r}")
    try:
        return Hotkey(key=key, modifiers=frozenset(map(str, modifiers)))
    except ValueError as exc:
        raise SettingsError(str(exc)) from exc


def hotkey_to_dict(hotkey: Hotkey) -> Dict[str, Any]:
    return {"modifiers": list(hotkey.ordered_modifiers), "key": hotkey.key}


def migrate_mapping(raw: MappingType[str, Any]) -> Dict[str, Any]:
    """Bring one stored mapping up to the current ``{trigger, actions}`` shape."""

    data = dict(raw)
    actions = data.pop("actions", None)
    commands = data.pop("commands", None)
    command_id = data.pop("commandId", None)
    command_name = data.pop("commandName", None)
    if actions is None:
        actions = commands
    if actions is None and command_id:
        actions = [{"id": command_id, "name": command_name or ""}]
    data["actions"] = list(actions or [])

    trigger = data.get("trigger")
    if isinstance(trigger, MappingType):
        data["trigger"] = [trigger]
    return data


def mapping_from_dict(raw: Any) -> Mapping:
    if not isinstance(raw, MappingType):
        raise SettingsError(f"mapping must be an object, got {raw!r}")
    data = migrate_mapping(raw)
    trigger = data.get("trigger")
    if not isinstance(trigger, list):
        raise SettingsError(f"mapping trigger must be a list: {raw!r}")
    try:
        return Mapping(
            trigger=tuple(hotkey_from_dict(item) for item in trigger),
            actions=tuple(action_from_dict(item) for item in data["actions"]),
        )
    except SettingsError:
        raise
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"invalid mapping {raw!r}: {exc}") from exc


def mapping_to_dict(mapping: Mapping) -> Dict[str, Any]:
    return {
        "trigger": [hotkey_to_dict(hotkey) for hotkey in mapping.trigger],
        "actions": [action_to_dict(action) for action in mapping.actions],
    }


def _positive_int(data: MappingType[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise SettingsError(f"{key} must be a number, got {value!r}")
    try:
        number = int(value)
    except ValueError as exc:
        raise SettingsError(f"{key} must be a number, got {value!r}") from exc
    if number <= 0:
        raise SettingsError(f"{key} must be positive, got {number}")
    return number


def settings_from_dict(
    data: MappingType[str, Any], *, logger_name: str | None = None
) -> LeaderSettings:
    """Build settings from stored JSON, migrating older shapes on the way."""

    leader_raw = data.get("leaderKey")
    leader_key = (
        hotkey_from_dict(leader_raw) if leader_raw is not None else DEFAULT_LEADER_KEY
    )

    raw_mappings = data.get("mappings") or []
    if not isinstance(raw_mappings, list):
        raise SettingsError("mappings must be a list")

    kept: List[Mapping] = []
    for raw in raw_mappings:
        mapping = mapping_from_dict(raw)
        # First occurrence wins.
        if any(sequences_equal(m.trigger, mapping.trigger) for m in kept):
            telemetry.record_event(
                "settings.duplicate_trigger",
                level="warning",
                data={"trigger": format_sequence(mapping.trigger)},
                logger_name=logger_name,
            )
            continue
        kept.append(mapping)

    return LeaderSettings(
        leader_key=leader_key,
        timeout_ms=_positive_int(data, "timeout", DEFAULT_TIMEOUT_MS),
        multi_key_timeout_ms=_positive_int(
            data, "multiKeyTimeout", DEFAULT_MULTI_KEY_TIMEOUT_MS
        ),
        table=MappingTable(kept, logger_name=logger_name),
    )


def settings_to_dict(settings: LeaderSettings) -> Dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "leaderKey": hotkey_to_dict(settings.leader_key),
        "timeout": settings.timeout_ms,
        "multiKeyTimeout": settings.multi_key_timeout_ms,
        "mappings": [mapping_to_dict(mapping) for mapping in settings.table],
    }


__all__ = [
    "SCHEMA_VERSION",
    "hotkey_from_dict",
    "hotkey_to_dict",
    "mapping_from_dict",
    "mapping_to_dict",
    "migrate_mapping",
    "settings_from_dict",
    "settings_to_dict",
]
