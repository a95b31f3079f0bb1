"""Config – settings dataclasses, loaders and validation errors."""

from governance_core.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    GovernanceSettings,
    Settings,
    SettingsLoader,
)
from governance_core.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "GovernanceSettings",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
