"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Port: source of timestamps for ledger entries, journals and stamps."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


def isoformat(clock: Clock) -> str:
    """Return the clock's current instant as an ISO 8601 string."""
    return clock.now().isoformat()


__all__ = ["Clock", "SystemClock", "isoformat", "utc_now"]
