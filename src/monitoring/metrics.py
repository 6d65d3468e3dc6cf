"""
Metrics Collection
Prometheus metrics for action dispatch and rendering
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the SDUI engine.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else REGISTRY

        # Dispatch metrics
        self.actions_total = Counter(
            "sdui_actions_dispatched_total",
            "Total number of dispatched actions",
            ["action_type", "outcome"],
            registry=self.registry,
        )
        self.api_call_failures = Counter(
            "sdui_api_call_failures_total",
            "API_CALL network effects that raised",
            registry=self.registry,
        )

        # Render metrics
        self.nodes_rendered = Counter(
            "sdui_nodes_rendered_total",
            "Component descriptors processed by the renderer",
            ["status"],
            registry=self.registry,
        )
        self.render_duration = Histogram(
            "sdui_render_duration_seconds",
            "Render pass duration in seconds",
            ["scope"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=self.registry,
        )

        # Registry metrics
        self.registry_size = Gauge(
            "sdui_registry_components",
            "Component types in the last built registry",
            registry=self.registry,
        )

    def record_action(self, action_type: str, outcome: str) -> None:
        """Record one dispatch step."""
        self.actions_total.labels(action_type=action_type, outcome=outcome).inc()

    def record_api_failure(self) -> None:
        self.api_call_failures.inc()

    def record_node(self, status: str) -> None:
        """Record a rendered, fallback, omitted or malformed node."""
        self.nodes_rendered.labels(status=status).inc()

    def set_registry_size(self, size: int) -> None:
        self.registry_size.set(size)

    @contextmanager
    def measure_render(self, scope: str) -> Iterator[None]:
        """Time a render pass."""
        with self.measure_duration(self.render_duration.labels(scope=scope).observe):
            yield

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
