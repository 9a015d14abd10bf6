"""Observability – MetricsCollector.

Keeps the most recent request metrics in a bounded FIFO buffer and derives
trailing-window summaries from it on demand. Nothing is persisted.
"""
from __future__ import annotations

import math
import threading
from collections import deque
from typing import Iterable

from campus_search.kernel.time import Clock, SystemClock
from campus_search.observability.logging import get_logger
from campus_search.observability.metrics.models import (
    EndpointLatency,
    PerformanceMetric,
    PerformanceSummary,
)

DEFAULT_CAPACITY = 10_000
SLOW_REQUEST_MS = 1000.0
SLOWEST_ENDPOINTS = 5

logger = get_logger(__name__)


class MetricsCollector:
    """Bounded in-memory store of :class:`PerformanceMetric` entries.

    Parameters
    ----------
    capacity:
        Maximum retained entries; the oldest entry is evicted first.
    slow_request_ms:
        Requests slower than this are logged as soon as they are recorded.
    clock:
        Source of "now" for window cut-offs.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        slow_request_ms: float = SLOW_REQUEST_MS,
        clock: Clock | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._slow_request_ms = slow_request_ms
        self._clock: Clock = clock or SystemClock()
        self._buffer: deque[PerformanceMetric] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def clock(self) -> Clock:
        return self._clock

    def record(self, metric: PerformanceMetric) -> None:
        with self._lock:
            self._buffer.append(metric)

        if metric.duration_ms > self._slow_request_ms:
            logger.warning(
                "request.slow",
                method=metric.method,
                endpoint=metric.endpoint,
                duration_ms=round(metric.duration_ms, 2),
            )
        if metric.error_message:
            logger.error(
                "request.failed",
                method=metric.method,
                endpoint=metric.endpoint,
                status_code=metric.status_code,
                error=metric.error_message,
            )

    def count(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def snapshot(self) -> list[PerformanceMetric]:
        with self._lock:
            return list(self._buffer)

    def for_endpoint(self, endpoint: str, limit: int = 100) -> list[PerformanceMetric]:
        """Most recent *limit* metrics recorded for *endpoint*, oldest first."""
        matching = [m for m in self.snapshot() if m.endpoint == endpoint]
        return matching[-limit:] if limit > 0 else []

    def in_range(self, start: float, end: float) -> list[PerformanceMetric]:
        """Metrics with ``start <= timestamp <= end`` (epoch seconds)."""
        return [m for m in self.snapshot() if start <= m.timestamp <= end]

    def summary(self, window_minutes: float = 60) -> PerformanceSummary:
        cutoff = self._clock.timestamp() - window_minutes * 60
        window = [m for m in self.snapshot() if m.timestamp >= cutoff]
        return summarize(window)


def summarize(metrics: Iterable[PerformanceMetric]) -> PerformanceSummary:
    """Aggregate *metrics*; an empty input gives :meth:`PerformanceSummary.empty`."""
    window = list(metrics)
    total = len(window)
    if total == 0:
        return PerformanceSummary.empty()

    durations = sorted(m.duration_ms for m in window)

    by_endpoint: dict[str, list[float]] = {}
    for m in window:
        by_endpoint.setdefault(m.endpoint, []).append(m.duration_ms)
    endpoints = sorted(
        (
            EndpointLatency(endpoint=name, avg_duration_ms=sum(values) / len(values), count=len(values))
            for name, values in by_endpoint.items()
        ),
        key=lambda e: e.avg_duration_ms,
        reverse=True,
    )

    return PerformanceSummary(
        total_requests=total,
        average_ms=sum(durations) / total,
        median_ms=durations[total // 2],
        p95_ms=_percentile(durations, 0.95),
        p99_ms=_percentile(durations, 0.99),
        cache_hit_rate=_rate(sum(1 for m in window if m.served_from_cache), total),
        compression_rate=_rate(sum(1 for m in window if m.compressed), total),
        error_rate=_rate(sum(1 for m in window if m.is_error), total),
        slowest_endpoints=tuple(endpoints[:SLOWEST_ENDPOINTS]),
    )


def _percentile(sorted_values: list[float], p: float) -> float:
    index = min(math.floor(len(sorted_values) * p), len(sorted_values) - 1)
    return sorted_values[index]


def _rate(part: int, total: int) -> float:
    return (part / total) * 100 if total else 0.0


__all__ = ["DEFAULT_CAPACITY", "SLOW_REQUEST_MS", "MetricsCollector", "summarize"]
