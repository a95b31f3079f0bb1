from governance_core.observability.metrics.memory import InMemoryMetrics
from governance_core.observability.metrics.noop import NoopMetrics
from governance_core.observability.metrics.ports import Counter, Gauge, Histogram, Metrics

__all__ = ["Counter", "Gauge", "Histogram", "InMemoryMetrics", "Metrics", "NoopMetrics"]
