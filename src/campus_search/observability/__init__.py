"""Observability – structured logging and request performance metrics."""

from campus_search.observability.logging import JsonLoggerFactory, configure_logging, get_logger
from campus_search.observability.metrics import (
    MetricsCollector,
    PerformanceMetric,
    PerformanceSummary,
)

__all__ = [
    "JsonLoggerFactory",
    "MetricsCollector",
    "PerformanceMetric",
    "PerformanceSummary",
    "configure_logging",
    "get_logger",
]
