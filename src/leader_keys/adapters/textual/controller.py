"""Minimal Textual adapter that wires leader events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from leader_keys.keymaps import Hotkey, Mapping, RawKeyEvent, format_sequence
from leader_keys.modes import DeadlineScheduler, KeyResult, ModeBus, format_help
from leader_keys.modes.leader_mode import LeaderStateMachine

LEADER_BADGE = "␣"

# Terminals deliver the primary modifier as ctrl on every OS.
TERMINAL_PLATFORM = "linux"

_NAMED_KEYS = {"space": " "}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_status: Callable[[str], None]
    show_notice: Callable[[str], None] = _noop
    show_help: Callable[[List[str]], None] = _noop
    log: Callable[[str], None] = _noop


def textual_key_event(key: str, character: Optional[str] = None) -> RawKeyEvent:
    """Translate a Textual key name (``"ctrl+space"``) into a raw key event."""

    *modifier_parts, base = key.split("+") if key != "+" else ["+"]
    modifiers = {part.lower() for part in modifier_parts}
    if character and len(character) == 1 and character.isprintable():
        label = character
    else:
        label = _NAMED_KEYS.get(base, base)
    return RawKeyEvent(
        key=label,
        ctrl="ctrl" in modifiers,
        meta="meta" in modifiers or "super" in modifiers,
        alt="alt" in modifiers,
        shift="shift" in modifiers,
    )


class TextualLeaderAdapter:
    """Bridges the state machine + bus events to a Textual-friendly surface."""

    def __init__(
        self,
        machine: LeaderStateMachine,
        bus: ModeBus,
        hooks: TextualUIHooks,
        scheduler: DeadlineScheduler,
    ) -> None:
        self.machine = machine
        self.bus = bus
        self.hooks = hooks
        self.scheduler = scheduler
        self._subscribe_events()

    def handle_textual_key(self, key: str, *, character: Optional[str] = None) -> KeyResult:
        event = textual_key_event(key, character)
        self._log_state("key ->", key=key, label=event.key)
        result = self.machine.handle_raw(event)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def process_timeouts(self) -> List[KeyResult]:
        """Fire expired leader timers; call from a polling interval."""

        results = [
            result
            for result in self.scheduler.process_due()
            if isinstance(result, KeyResult)
        ]
        for outcome in results:
            self._log_state("timeout ->", status=outcome.status)
        return results

    def _subscribe_events(self) -> None:
        self.bus.subscribe("leader.active", lambda _payload: self._on_active())
        self.bus.subscribe("leader.sequence", self._on_sequence)
        self.bus.subscribe(
            "leader.inactive", lambda _payload: self.hooks.update_status("")
        )
        self.bus.subscribe("leader.notice", self._on_notice)
        self.bus.subscribe("leader.help", self._on_help)

    def _on_active(self) -> None:
        self.hooks.update_status(f"{LEADER_BADGE} LEADER")

    def _on_sequence(self, payload: object | None) -> None:
        sequence: Sequence[Hotkey] = payload if isinstance(payload, tuple) else ()
        if sequence:
            text = format_sequence(sequence, platform=self.machine.platform)
            self.hooks.update_status(f"{LEADER_BADGE} {text}")
        else:
            self._on_active()

    def _on_notice(self, payload: object | None) -> None:
        message = str(payload)
        self._log_state("notice ->", message=message)
        self.hooks.show_notice(message)

    def _on_help(self, payload: object | None) -> None:
        mappings: Sequence[Mapping] = payload if isinstance(payload, tuple) else ()
        self.hooks.show_help(format_help(mappings, platform=self.machine.platform))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = {
            "active": self.machine.active,
            "sequence": format_sequence(self.machine.sequence),
            "pending_timers": len(self.scheduler.pending()),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = [
    "TERMINAL_PLATFORM",
    "TextualLeaderAdapter",
    "TextualUIHooks",
    "textual_key_event",
]
