"""Observability – NoopMetrics implementation."""
from __future__ import annotations

from governance_core.observability.metrics.ports import Counter, Gauge, Histogram, Metrics


class _NoopCounter(Counter):
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        pass


class _NoopHistogram(Histogram):
    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass


class _NoopGauge(Gauge):
    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass


class NoopMetrics(Metrics):
    """Discards every measurement; the default when no backend is wired."""

    def counter(self, name: str, description: str = "") -> Counter:
        return _NoopCounter()

    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram:
        return _NoopHistogram()

    def gauge(self, name: str, description: str = "") -> Gauge:
        return _NoopGauge()


__all__ = ["NoopMetrics"]
