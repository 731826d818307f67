"""Metrics sinks."""

from .sink import MetricsSink, NullMetricsSink, PrometheusMetricsSink, emit

__all__ = ["MetricsSink", "NullMetricsSink", "PrometheusMetricsSink", "emit"]
