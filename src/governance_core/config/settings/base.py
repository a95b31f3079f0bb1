"""Config settings – Settings base class and GovernanceSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from governance_core.config.validation import InvalidSettingValueError

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


@dataclasses.dataclass
class Settings:
    """Base class for environment-driven settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class GovernanceSettings(Settings):
    """Runtime knobs for one governance scope.

    Loaded from ``GOVERNANCE_*`` environment variables, e.g.
    ``GOVERNANCE_XP_MAX_ATTEMPTS=8``.
    """

    _prefix: ClassVar[str] = "GOVERNANCE"

    scope_id: str = "default"
    log_level: str = "INFO"
    log_json: bool = True
    xp_max_attempts: int = 5
    xp_retry_wait_seconds: float = 0.0

    def _validate(self) -> None:
        if not self.scope_id:
            raise InvalidSettingValueError("scope_id", self.scope_id, "must not be empty")
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise InvalidSettingValueError(
                "log_level", self.log_level, f"expected one of {sorted(_LOG_LEVELS)}"
            )
        if self.xp_max_attempts < 1:
            raise InvalidSettingValueError("xp_max_attempts", self.xp_max_attempts, "must be >= 1")
        if self.xp_retry_wait_seconds < 0:
            raise InvalidSettingValueError(
                "xp_retry_wait_seconds", self.xp_retry_wait_seconds, "must be >= 0"
            )


__all__ = ["GovernanceSettings", "Settings"]
