"""Config settings – environment-based configuration."""
from governance_core.config.settings.base import GovernanceSettings, Settings
from governance_core.config.settings.loaders import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SettingsLoader,
)

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "GovernanceSettings",
    "Settings",
    "SettingsLoader",
]
