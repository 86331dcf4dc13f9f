"""UI-agnostic leader-key sequence engine."""

__all__ = [
    "actions",
    "adapters",
    "keymaps",
    "modes",
    "runtime",
    "settings",
]

__version__ = "0.1.0"
