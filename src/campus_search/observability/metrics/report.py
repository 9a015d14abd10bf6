"""Observability – plain-text rendering of cache and performance metrics."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from campus_search.observability.metrics.models import PerformanceSummary

if TYPE_CHECKING:
    from campus_search.application.cache.stats import CacheStats


def format_summary(summary: PerformanceSummary) -> str:
    lines = [
        "=== Performance Summary ===",
        f"Total Requests: {summary.total_requests}",
        "",
        "Response Times:",
        f"  Average: {summary.average_ms:.2f}ms",
        f"  Median: {summary.median_ms:.2f}ms",
        f"  P95: {summary.p95_ms:.2f}ms",
        f"  P99: {summary.p99_ms:.2f}ms",
        "",
        "Optimization Rates:",
        f"  Cache Hit Rate: {summary.cache_hit_rate:.2f}%",
        f"  Compression Rate: {summary.compression_rate:.2f}%",
        f"  Error Rate: {summary.error_rate:.2f}%",
        "",
        "Slowest Endpoints:",
        *(
            f"  {e.endpoint}: {e.avg_duration_ms:.2f}ms ({e.count} requests)"
            for e in summary.slowest_endpoints
        ),
    ]
    return "\n".join(lines)


def render_report(
    cache_stats: "CacheStats",
    summary: PerformanceSummary,
    metric_count: int,
    window_minutes: float,
    generated_at: datetime,
) -> str:
    """Text body of ``GET /api/admin/metrics?format=text``."""
    lines = [
        "=== Cache Metrics ===",
        f"Type: {cache_stats.backend.value}",
        f"Hits: {cache_stats.hits}",
        f"Misses: {cache_stats.misses}",
        f"Hit Rate: {cache_stats.hit_rate:.2f}%",
        f"Size: {cache_stats.size} entries",
        "",
        format_summary(summary),
        "",
        f"Total Metrics Stored: {metric_count}",
        f"Time Range: Last {window_minutes:g} minutes",
        f"Generated: {generated_at.isoformat()}",
    ]
    return "\n".join(lines)


__all__ = ["format_summary", "render_report"]
