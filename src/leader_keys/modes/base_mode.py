"""Results, collaborator protocols and the event bus shared by the leader mode."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence

from leader_keys.actions import Action, ChainReport
from leader_keys.keymaps import Hotkey, Mapping, format_sequence
from leader_keys.runtime import telemetry


@dataclass(slots=True)
class KeyResult:
    """Result returned from every leader transition."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    report: Optional[ChainReport] = None


class StatusReporter(Protocol):
    """Observer notified of leader transitions. Calls are best-effort."""

    def on_leader_active(self) -> None: ...

    def on_sequence_updated(self, seq: Sequence[Hotkey]) -> None: ...

    def on_leader_inactive(self) -> None: ...

    def on_notice(self, message: str) -> None: ...

    def on_help(self, mappings: Sequence[Mapping]) -> None: ...


class CommandPrompt(Protocol):
    """Searchable prompt opened by the ``:`` escape."""

    def open(self, on_choose: Callable[[Action], None]) -> None: ...


class ModeBus:
    """Minimal event bus letting the engine publish structured signals."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}
        self._logger_name = logger_name

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            try:
                callback(payload)
            except Exception as exc:
                telemetry.record_event(
                    "bus.subscriber_error",
                    level="error",
                    data={"bus_event": event, "error": repr(exc)},
                    logger_name=self._logger_name,
                )


class BusStatusReporter:
    """Publishes reporter calls onto a ``ModeBus`` as ``leader.*`` events."""

    def __init__(self, bus: ModeBus) -> None:
        self.bus = bus

    def on_leader_active(self) -> None:
        self.bus.emit("leader.active", None)

    def on_sequence_updated(self, seq: Sequence[Hotkey]) -> None:
        self.bus.emit("leader.sequence", tuple(seq))

    def on_leader_inactive(self) -> None:
        self.bus.emit("leader.inactive", None)

    def on_notice(self, message: str) -> None:
        self.bus.emit("leader.notice", message)

    def on_help(self, mappings: Sequence[Mapping]) -> None:
        self.bus.emit("leader.help", tuple(mappings))


def format_help(
    mappings: Sequence[Mapping], *, platform: Optional[str] = None
) -> list[str]:
    lines = []
    for mapping in mappings:
        chain = " → ".join(action.label for action in mapping.actions)
        lines.append(f"{format_sequence(mapping.trigger, platform=platform)}: {chain}")
    return lines


__all__ = [
    "BusStatusReporter",
    "CommandPrompt",
    "KeyResult",
    "ModeBus",
    "StatusReporter",
    "format_help",
]
