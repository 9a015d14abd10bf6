"""Observability – request performance metrics."""
from campus_search.observability.metrics.collector import MetricsCollector, summarize
from campus_search.observability.metrics.models import (
    EndpointLatency,
    PerformanceMetric,
    PerformanceSummary,
)
from campus_search.observability.metrics.report import format_summary, render_report

__all__ = [
    "EndpointLatency",
    "MetricsCollector",
    "PerformanceMetric",
    "PerformanceSummary",
    "format_summary",
    "render_report",
    "summarize",
]
