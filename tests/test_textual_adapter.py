from __future__ import annotations

import sys
from typing import List

import pytest

from leader_keys.actions import ActionDispatcher, CommandRef, CommandRegistry, InvokeAction
from leader_keys.adapters.textual import (
    TERMINAL_PLATFORM,
    TextualLeaderAdapter,
    TextualUIHooks,
    textual_key_event,
)
from leader_keys.keymaps import Hotkey, Mapping, MappingTable
from leader_keys.modes import BusStatusReporter, DeadlineScheduler, ManualClock, ModeBus
from leader_keys.modes.leader_mode import LeaderStateMachine
from leader_keys.settings import LeaderSettings


def make_adapter(hooks: TextualUIHooks, calls: List[str], clock: ManualClock):
    registry = CommandRegistry()
    registry.register(CommandRef("demo.hello", lambda: calls.append("hello")))
    registry.register(CommandRef("demo.clear", lambda: calls.append("clear")))
    settings = LeaderSettings(
        table=MappingTable(
            [
                Mapping(trigger=(Hotkey.of("H"),), actions=(InvokeAction("demo.hello"),)),
                Mapping(
                    trigger=(Hotkey.of("H"), Hotkey.of("C")),
                    actions=(InvokeAction("demo.clear"),),
                ),
            ]
        )
    )
    bus = ModeBus()
    scheduler = DeadlineScheduler(clock=clock)
    machine = LeaderStateMachine(
        settings,
        ActionDispatcher(invoke=registry.invoke, open_path=lambda path: None),
        BusStatusReporter(bus),
        scheduler,
        platform=TERMINAL_PLATFORM,
    )
    return TextualLeaderAdapter(machine, bus, hooks, scheduler)


def test_textual_key_event_translation() -> None:
    leader = textual_key_event("ctrl+space")
    assert leader.key == " "
    assert leader.ctrl and not leader.shift

    question = textual_key_event("question_mark", "?")
    assert question.key == "?"

    control_letter = textual_key_event("ctrl+a", "\x01")
    assert control_letter.key == "a"
    assert control_letter.ctrl


def test_adapter_updates_status_line_through_session() -> None:
    statuses: List[str] = []
    calls: List[str] = []
    clock = ManualClock()
    adapter = make_adapter(TextualUIHooks(update_status=statuses.append), calls, clock)

    adapter.handle_textual_key("ctrl+space")
    result = adapter.handle_textual_key("h", character="h")

    assert result.status == "ambiguous"
    assert statuses == ["␣ LEADER", "␣ H"]

    clock.advance(600)
    fired = adapter.process_timeouts()

    assert [outcome.status for outcome in fired] == ["exact"]
    assert calls == ["hello"]
    assert statuses[-1] == ""


def test_adapter_passes_through_keys_when_idle() -> None:
    adapter = make_adapter(
        TextualUIHooks(update_status=lambda status: None), [], ManualClock()
    )

    result = adapter.handle_textual_key("h", character="h")

    assert result.consumed is False


def test_adapter_relays_notices_and_help() -> None:
    notices: List[str] = []
    help_lines: List[List[str]] = []
    hooks = TextualUIHooks(
        update_status=lambda status: None,
        show_notice=notices.append,
        show_help=help_lines.append,
    )
    adapter = make_adapter(hooks, [], ManualClock())

    adapter.handle_textual_key("ctrl+space")
    adapter.handle_textual_key("x", character="x")
    adapter.handle_textual_key("ctrl+space")
    adapter.handle_textual_key("question_mark", character="?")

    assert notices == ['Leader: No mapping for "X"']
    assert help_lines == [["H: demo.hello", "H C: demo.clear"]]


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_status=lambda status: None, log=logs.append)
    adapter = make_adapter(hooks, [], ManualClock())

    adapter.handle_textual_key("ctrl+space")

    assert any(line.startswith("key ->") for line in logs)
    assert any("status='leader_active'" in line for line in logs)


def test_terminal_ctrl_space_enters_leader_on_macos(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(sys, "platform", "darwin")
    statuses: List[str] = []
    hooks = TextualUIHooks(update_status=statuses.append)
    adapter = make_adapter(hooks, [], ManualClock())

    result = adapter.handle_textual_key("ctrl+space")

    assert result.status == "leader_active"
    assert statuses == ["␣ LEADER"]
