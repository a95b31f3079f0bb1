"""Observability – InMemoryMetrics, an in-process metrics registry.

Series are keyed by ``(instrument name, sorted label pairs)``.  The registry
backs the per-event-type publish counters of the event bus and can be read
back with :meth:`InMemoryMetrics.counter_value` / :meth:`snapshot`.
"""
from __future__ import annotations

from collections import defaultdict

from governance_core.observability.metrics.ports import Counter, Gauge, Histogram, Metrics

_SeriesKey = tuple[tuple[str, str], ...]


def _key(labels: dict[str, str] | None) -> _SeriesKey:
    return tuple(sorted((labels or {}).items()))


class _InMemoryCounter(Counter):
    def __init__(self, name: str) -> None:
        self.name = name
        self.series: dict[_SeriesKey, float] = defaultdict(float)

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        if value < 0:
            raise ValueError(f"counter {self.name!r} cannot decrease (got {value})")
        self.series[_key(labels)] += value


class _InMemoryHistogram(Histogram):
    def __init__(self, name: str) -> None:
        self.name = name
        self.series: dict[_SeriesKey, list[float]] = defaultdict(list)

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        self.series[_key(labels)].append(value)


class _InMemoryGauge(Gauge):
    def __init__(self, name: str) -> None:
        self.name = name
        self.series: dict[_SeriesKey, float] = {}

    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        self.series[_key(labels)] = value


class InMemoryMetrics(Metrics):
    """Metrics registry held in process memory.

    Usage::

        metrics = InMemoryMetrics()
        metrics.counter("events_published_total").add(labels={"event_type": "x"})
        metrics.counter_value("events_published_total", {"event_type": "x"})  # 1.0
    """

    def __init__(self) -> None:
        self._counters: dict[str, _InMemoryCounter] = {}
        self._histograms: dict[str, _InMemoryHistogram] = {}
        self._gauges: dict[str, _InMemoryGauge] = {}

    def counter(self, name: str, description: str = "") -> Counter:
        if name not in self._counters:
            self._counters[name] = _InMemoryCounter(name)
        return self._counters[name]

    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram:
        if name not in self._histograms:
            self._histograms[name] = _InMemoryHistogram(name)
        return self._histograms[name]

    def gauge(self, name: str, description: str = "") -> Gauge:
        if name not in self._gauges:
            self._gauges[name] = _InMemoryGauge(name)
        return self._gauges[name]

    def gauge_value(self, name: str, labels: dict[str, str] | None = None) -> float | None:
        gauge = self._gauges.get(name)
        if gauge is None:
            return None
        return gauge.series.get(_key(labels))

    def counter_value(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Value of one series, or the sum over all series when *labels* is ``None``."""
        counter = self._counters.get(name)
        if counter is None:
            return 0.0
        if labels is None:
            return sum(counter.series.values())
        return counter.series.get(_key(labels), 0.0)

    def histogram_values(self, name: str, labels: dict[str, str] | None = None) -> list[float]:
        histogram = self._histograms.get(name)
        if histogram is None:
            return []
        if labels is None:
            return [v for values in histogram.series.values() for v in values]
        return list(histogram.series.get(_key(labels), []))

    def snapshot(self, name: str, label: str) -> dict[str, float]:
        """Collapse counter *name* into ``{label value: total}``."""
        counter = self._counters.get(name)
        out: dict[str, float] = defaultdict(float)
        if counter is not None:
            for key, value in counter.series.items():
                labels = dict(key)
                if label in labels:
                    out[labels[label]] += value
        return dict(out)

    def reset(self) -> None:
        self._counters.clear()
        self._histograms.clear()
        self._gauges.clear()


__all__ = ["InMemoryMetrics"]
