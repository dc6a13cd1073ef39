"""Metrics collection and reporting"""
from pulse.metrics.collector import MetricsCollector

try:
    from pulse.metrics.otel import OTelMetricsCollector
    __all__ = ["MetricsCollector", "OTelMetricsCollector"]
except ImportError:
    __all__ = ["MetricsCollector"]
