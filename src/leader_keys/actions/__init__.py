"""Action variants, host command registry and chain dispatch."""

from .models import Action, InvokeAction, OpenAction, action_from_dict, action_to_dict
from .registry import CommandRef, CommandRegistry
from .dispatch import (
    ActionDispatcher,
    ChainReport,
    DispatchError,
    DispatchResult,
    Dispatcher,
    run_chain,
)

__all__ = [
    "Action",
    "InvokeAction",
    "OpenAction",
    "action_from_dict",
    "action_to_dict",
    "CommandRef",
    "CommandRegistry",
    "ActionDispatcher",
    "ChainReport",
    "DispatchError",
    "DispatchResult",
    "Dispatcher",
    "run_chain",
]
