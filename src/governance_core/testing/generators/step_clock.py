"""Testing generators – StepClock."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

_DEFAULT_START = datetime(2026, 1, 1, tzinfo=UTC)


class StepClock:
    """A deterministic clock that advances by a fixed delta on every
    :meth:`now` call.

    Ledger entries, journal records and version stamps taken from it are
    strictly increasing without relying on wall time.

    Parameters
    ----------
    start:
        The datetime returned on the *first* :meth:`now` call.
        Defaults to ``2026-01-01 00:00:00 UTC``.
    step:
        Amount to advance after each :meth:`now` call.  Keyword arguments of
        :class:`datetime.timedelta` are accepted as well (``seconds=1``).

    Example::

        clock = StepClock(milliseconds=10)
        t0 = clock.now()   # 2026-01-01 00:00:00
        t1 = clock.now()   # 2026-01-01 00:00:00.010
    """

    def __init__(
        self,
        start: datetime | None = None,
        step: timedelta | None = None,
        **step_kwargs: int | float,
    ) -> None:
        self._start = start or _DEFAULT_START
        self._current = self._start
        if step is not None:
            self._step = step
        elif step_kwargs:
            self._step = timedelta(**step_kwargs)
        else:
            self._step = timedelta(seconds=1)
        self._call_count = 0

    def now(self) -> datetime:
        """Return the current tick and advance the clock by one step."""
        value = self._current
        self._current += self._step
        self._call_count += 1
        return value

    @property
    def call_count(self) -> int:
        return self._call_count

    def reset(self, start: datetime | None = None) -> None:
        self._current = start or self._start
        self._call_count = 0

    def peek(self) -> datetime:
        """Return the next value :meth:`now` would return without advancing."""
        return self._current


__all__ = ["StepClock"]
