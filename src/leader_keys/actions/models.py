"""Tagged action variants carried by mapping chains."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Mapping, Union


@dataclass(frozen=True, slots=True)
class InvokeAction:
    """Run a host command by id."""

    id: str
    name: str = ""
    kind: ClassVar[Literal["invoke"]] = "invoke"

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("InvokeAction id cannot be empty")

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True, slots=True)
class OpenAction:
    """Open a file through the host."""

    path: str
    name: str = ""
    kind: ClassVar[Literal["open"]] = "open"

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("OpenAction path cannot be empty")

    @property
    def label(self) -> str:
        return self.name or f"Open file: {self.path}"


Action = Union[InvokeAction, OpenAction]

# Older settings files used host-specific tags.
_KIND_ALIASES = {
    "invoke": "invoke",
    "obsidian": "invoke",
    "command": "invoke",
    "open": "open",
    "open-file": "open",
}


def action_from_dict(data: Mapping[str, Any]) -> Action:
    raw_kind = str(data.get("kind") or data.get("type") or "invoke")
    kind = _KIND_ALIASES.get(raw_kind)
    name = str(data.get("name") or "")
    if kind == "invoke":
        return InvokeAction(id=str(data.get("id") or ""), name=name)
    if kind == "open":
        return OpenAction(path=str(data.get("path") or ""), name=name)
    raise ValueError(f"Unknown action kind '{raw_kind}'")


def action_to_dict(action: Action) -> dict[str, str]:
    payload = {"kind": action.kind}
    if isinstance(action, InvokeAction):
        payload["id"] = action.id
    else:
        payload["path"] = action.path
    if action.name:
        payload["name"] = action.name
    return payload


__all__ = [
    "Action",
    "InvokeAction",
    "OpenAction",
    "action_from_dict",
    "action_to_dict",
]
