"""Observability – PerformanceMetric, PerformanceSummary, EndpointLatency."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True, slots=True)
class PerformanceMetric:
    """One completed request.

    ``timestamp`` is seconds since the epoch; ``duration_ms`` is wall time
    spent producing the response.
    """

    timestamp: float
    endpoint: str
    method: str
    duration_ms: float
    status_code: int
    cached: bool = False
    compressed: bool = False
    compression_ratio: float | None = None
    cache_hit: bool | None = None
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        return bool(self.error_message)

    @property
    def served_from_cache(self) -> bool:
        if self.cache_hit is not None:
            return self.cache_hit
        return self.cached


@dataclasses.dataclass(frozen=True, slots=True)
class EndpointLatency:
    endpoint: str
    avg_duration_ms: float
    count: int


@dataclasses.dataclass(frozen=True)
class PerformanceSummary:
    """Aggregates over a trailing window. Rates are percentages (0-100)."""

    total_requests: int
    average_ms: float
    median_ms: float
    p95_ms: float
    p99_ms: float
    cache_hit_rate: float
    compression_rate: float
    error_rate: float
    slowest_endpoints: tuple[EndpointLatency, ...] = ()

    @classmethod
    def empty(cls) -> "PerformanceSummary":
        return cls(
            total_requests=0,
            average_ms=0.0,
            median_ms=0.0,
            p95_ms=0.0,
            p99_ms=0.0,
            cache_hit_rate=0.0,
            compression_rate=0.0,
            error_rate=0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "averageResponseTime": self.average_ms,
            "medianResponseTime": self.median_ms,
            "p95ResponseTime": self.p95_ms,
            "p99ResponseTime": self.p99_ms,
            "cacheHitRate": self.cache_hit_rate,
            "compressionRate": self.compression_rate,
            "errorRate": self.error_rate,
            "slowestEndpoints": [
                {"endpoint": e.endpoint, "avgDuration": e.avg_duration_ms, "count": e.count}
                for e in self.slowest_endpoints
            ],
        }


__all__ = ["EndpointLatency", "PerformanceMetric", "PerformanceSummary"]
