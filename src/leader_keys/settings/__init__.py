"""Leader configuration, its JSON schema and file persistence."""

from .models import (
    DEFAULT_LEADER_KEY,
    DEFAULT_MULTI_KEY_TIMEOUT_MS,
    DEFAULT_TIMEOUT_MS,
    LeaderConfig,
    LeaderSettings,
    SettingsError,
)
from .schema import settings_from_dict, settings_to_dict
from .store import SettingsStore, apply_env_overrides, default_settings_path

__all__ = [
    "DEFAULT_LEADER_KEY",
    "DEFAULT_MULTI_KEY_TIMEOUT_MS",
    "DEFAULT_TIMEOUT_MS",
    "LeaderConfig",
    "LeaderSettings",
    "SettingsError",
    "SettingsStore",
    "apply_env_overrides",
    "default_settings_path",
    "settings_from_dict",
    "settings_to_dict",
]
