from __future__ import annotations

import json
from pathlib import Path

import pytest

from leader_keys.actions import InvokeAction, OpenAction
from leader_keys.keymaps import Hotkey, Mapping, MappingConflictError
from leader_keys.settings import (
    DEFAULT_LEADER_KEY,
    LeaderSettings,
    SettingsError,
    SettingsStore,
    apply_env_overrides,
    settings_from_dict,
    settings_to_dict,
)


def hotkey(key: str, *modifiers: str) -> dict:
    return {"modifiers": list(modifiers), "key": key}


def test_defaults_when_keys_missing() -> None:
    settings = settings_from_dict({})

    assert settings.leader_key == DEFAULT_LEADER_KEY
    assert settings.timeout_ms == 2000
    assert settings.multi_key_timeout_ms == 500
    assert len(settings.table) == 0


def test_migrates_single_command_mappings() -> None:
    settings = settings_from_dict(
        {
            "leaderKey": hotkey(" ", "Mod"),
            "mappings": [
                {
                    "trigger": hotkey("t"),
                    "commandId": "app:toggle",
                    "commandName": "Toggle",
                }
            ],
        }
    )

    assert settings.leader_key == Hotkey.of("SPACE", "Mod")
    (mapping,) = settings.table.mappings
    assert mapping.trigger == (Hotkey.of("T"),)
    assert mapping.actions == (InvokeAction("app:toggle", "Toggle"),)


def test_migrates_untyped_and_host_typed_commands() -> None:
    settings = settings_from_dict(
        {
            "mappings": [
                {
                    "trigger": [hotkey("o"), hotkey("d")],
                    "commands": [
                        {"id": "daily:open", "name": "Daily"},
                        {"type": "open-file", "path": "inbox.md", "name": "Inbox"},
                    ],
                }
            ]
        }
    )

    assert settings.table[0].actions == (
        InvokeAction("daily:open", "Daily"),
        OpenAction("inbox.md", "Inbox"),
    )


def test_duplicate_triggers_keep_first() -> None:
    settings = settings_from_dict(
        {
            "mappings": [
                {"trigger": [hotkey("A")], "actions": [{"id": "first"}]},
                {"trigger": [hotkey("a")], "actions": [{"id": "second"}]},
            ]
        }
    )

    assert len(settings.table) == 1
    assert settings.table[0].actions[0] == InvokeAction("first")


@pytest.mark.parametrize(
    "payload",
    [
        {"timeout": 0},
        {"multiKeyTimeout": -5},
        {"timeout": "soon"},
        {"mappings": {"not": "a list"}},
        {"mappings": [{"trigger": [], "actions": [{"id": "x"}]}]},
        {"mappings": [{"trigger": [hotkey("A")], "actions": []}]},
        {"leaderKey": hotkey("K", "Hyper")},
    ],
)
def test_invalid_payloads_raise(payload: dict) -> None:
    with pytest.raises(SettingsError):
        settings_from_dict(payload)


def test_settings_reject_non_positive_timeouts() -> None:
    with pytest.raises(SettingsError):
        LeaderSettings(timeout_ms=0)


def test_serialized_shape() -> None:
    settings = LeaderSettings()
    settings.table.add(
        Mapping(trigger=(Hotkey.of("P", "Shift", "Mod"),), actions=(InvokeAction("x"),))
    )

    data = settings_to_dict(settings)

    assert data["version"] == 2
    assert data["leaderKey"] == {"modifiers": ["Mod"], "key": "SPACE"}
    assert data["mappings"][0]["trigger"] == [
        {"modifiers": ["Mod", "Shift"], "key": "P"}
    ]
    assert data["mappings"][0]["actions"] == [{"kind": "invoke", "id": "x"}]


def test_store_missing_file_yields_defaults(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "missing.json")

    settings = store.load()

    assert settings.leader_key == DEFAULT_LEADER_KEY
    assert len(settings.table) == 0


def test_store_rejects_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SettingsError):
        SettingsStore(path).load()


def test_store_persists_after_each_mutation(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path)
    settings = store.attach(store.load())

    settings.table.add(
        Mapping(trigger=(Hotkey.of("A"), Hotkey.of("B")), actions=(OpenAction("a.md"),))
    )

    reloaded = SettingsStore(path).load()
    assert reloaded.table.mappings == settings.table.mappings

    with pytest.raises(MappingConflictError):
        settings.table.add(
            Mapping(trigger=(Hotkey.of("A"), Hotkey.of("B")), actions=(InvokeAction("x"),))
        )
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert len(stored["mappings"]) == 1

    settings.table.remove(0)
    assert len(SettingsStore(path).load().table) == 0


def test_failed_persist_leaves_table_and_disk_untouched(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.mkdir()
    store = SettingsStore(path)
    settings = store.attach(LeaderSettings())

    with pytest.raises(OSError):
        settings.table.add(
            Mapping(trigger=(Hotkey.of("A"),), actions=(InvokeAction("x"),))
        )

    assert len(settings.table) == 0
    assert settings.table.revision() == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["settings.json"]


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEADER_KEYS_LEADER_KEY", "alt+l")
    monkeypatch.setenv("LEADER_KEYS_TIMEOUT_MS", "3500")
    monkeypatch.setenv("LEADER_KEYS_MULTI_KEY_TIMEOUT_MS", "250")

    settings = apply_env_overrides(LeaderSettings())

    assert settings.leader_key == Hotkey.of("L", "Alt")
    assert settings.timeout_ms == 3500
    assert settings.multi_key_timeout_ms == 250


def test_env_override_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEADER_KEYS_TIMEOUT_MS", "later")

    with pytest.raises(SettingsError):
        apply_env_overrides(LeaderSettings())


def test_default_path_honours_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    target = tmp_path / "custom.json"
    monkeypatch.setenv("LEADER_KEYS_SETTINGS_FILE", str(target))

    assert SettingsStore().path == target
