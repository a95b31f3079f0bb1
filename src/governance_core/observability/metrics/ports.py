"""Observability – Counter, Gauge, Histogram and Metrics ports."""
from __future__ import annotations

import abc


class Counter(abc.ABC):
    """Monotonically increasing counter."""

    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None: ...


class Histogram(abc.ABC):
    """Distribution of observed values (latencies in ms by default)."""

    @abc.abstractmethod
    def record(self, value: float, labels: dict[str, str] | None = None) -> None: ...


class Gauge(abc.ABC):
    """Point-in-time value that can go up and down."""

    @abc.abstractmethod
    def set(self, value: float, labels: dict[str, str] | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments.

    Instruments are looked up by name; asking twice for the same name must
    return an instrument that feeds the same series.
    """

    @abc.abstractmethod
    def counter(self, name: str, description: str = "") -> Counter: ...

    @abc.abstractmethod
    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram: ...

    @abc.abstractmethod
    def gauge(self, name: str, description: str = "") -> Gauge: ...


__all__ = ["Counter", "Gauge", "Histogram", "Metrics"]
