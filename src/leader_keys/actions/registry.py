"""Host command registry backing ``invoke`` actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator


@dataclass(frozen=True, slots=True)
class CommandRef:
    """Callable metadata for a named host command."""

    id: str
    handler: Callable[[], object]
    name: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CommandRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    @property
    def label(self) -> str:
        return self.name or self.id

    def __call__(self) -> object:
        return self.handler()


class CommandRegistry:
    """Owns the commands a host exposes to leader mappings."""

    def __init__(self) -> None:
        self._commands: Dict[str, CommandRef] = {}

    def register(self, command: CommandRef, *, replace: bool = False) -> CommandRef:
        if not replace and command.id in self._commands:
            raise ValueError(f"Command '{command.id}' already registered")
        self._commands[command.id] = command
        return command

    def get(self, command_id: str) -> CommandRef:
        try:
            return self._commands[command_id]
        except KeyError as exc:
            raise KeyError(f"Command '{command_id}' is not registered") from exc

    def invoke(self, command_id: str) -> object:
        return self.get(command_id)()

    def search(self, query: str) -> list[CommandRef]:
        needle = query.strip().lower()
        commands = sorted(self._commands.values(), key=lambda c: c.label.lower())
        if not needle:
            return commands
        return [c for c in commands if needle in c.label.lower()]

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __iter__(self) -> Iterator[CommandRef]:
        return iter(tuple(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)


__all__ = ["CommandRef", "CommandRegistry"]
