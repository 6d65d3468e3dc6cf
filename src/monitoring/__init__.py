"""
Engine Monitoring
Prometheus metrics and operation tracing
"""

from .tracer import trace_operation
from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
    "trace_operation",
]
