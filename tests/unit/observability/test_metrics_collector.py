"""Unit tests for MetricsCollector, summaries and the text report."""
from __future__ import annotations

from datetime import UTC, datetime

import pytest
from structlog.testing import capture_logs

from campus_search.application.cache import CacheBackendKind, CacheStats
from campus_search.kernel.time import FrozenClock
from campus_search.observability.metrics import (
    MetricsCollector,
    PerformanceMetric,
    PerformanceSummary,
    format_summary,
    render_report,
    summarize,
)


def _metric(
    duration_ms: float = 10.0,
    *,
    timestamp: float | None = None,
    endpoint: str = "/api/search/institutions",
    **kwargs: object,
) -> PerformanceMetric:
    return PerformanceMetric(
        timestamp=FrozenClock().timestamp() if timestamp is None else timestamp,
        endpoint=endpoint,
        method="GET",
        duration_ms=duration_ms,
        status_code=200,
        **kwargs,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# PerformanceMetric
# ---------------------------------------------------------------------------


class TestPerformanceMetric:
    def test_error_follows_message(self) -> None:
        assert _metric().is_error is False
        assert _metric(error_message="boom").is_error is True
        assert _metric(error_message="").is_error is False

    def test_cache_hit_takes_precedence_over_cached(self) -> None:
        assert _metric(cached=True).served_from_cache is True
        assert _metric(cached=True, cache_hit=False).served_from_cache is False
        assert _metric(cache_hit=True).served_from_cache is True


# ---------------------------------------------------------------------------
# MetricsCollector
# ---------------------------------------------------------------------------


class TestMetricsCollector:
    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            MetricsCollector(capacity=0)

    def test_oldest_entries_evicted_first(self) -> None:
        collector = MetricsCollector(capacity=3, clock=FrozenClock())
        for i in range(5):
            collector.record(_metric(float(i)))
        assert collector.count() == 3
        assert [m.duration_ms for m in collector.snapshot()] == [2.0, 3.0, 4.0]

    def test_clear(self) -> None:
        collector = MetricsCollector(clock=FrozenClock())
        collector.record(_metric())
        collector.clear()
        assert collector.count() == 0
        assert collector.summary() == PerformanceSummary.empty()

    def test_for_endpoint_returns_most_recent(self) -> None:
        collector = MetricsCollector(clock=FrozenClock())
        for i in range(4):
            collector.record(_metric(float(i), endpoint="/a"))
        collector.record(_metric(99.0, endpoint="/b"))
        assert [m.duration_ms for m in collector.for_endpoint("/a", limit=2)] == [2.0, 3.0]
        assert collector.for_endpoint("/a", limit=0) == []

    def test_in_range_is_inclusive(self) -> None:
        collector = MetricsCollector(clock=FrozenClock())
        for ts in (100.0, 200.0, 300.0):
            collector.record(_metric(timestamp=ts))
        assert [m.timestamp for m in collector.in_range(100.0, 200.0)] == [100.0, 200.0]

    def test_summary_window_uses_clock(self) -> None:
        clock = FrozenClock()
        collector = MetricsCollector(clock=clock)
        now = clock.timestamp()
        collector.record(_metric(1.0, timestamp=now - 2 * 3600))
        collector.record(_metric(2.0, timestamp=now - 30 * 60))
        collector.record(_metric(3.0, timestamp=now))
        assert collector.summary(window_minutes=60).total_requests == 2
        assert collector.summary(window_minutes=180).total_requests == 3
        clock.advance(hours=1)
        assert collector.summary(window_minutes=60).total_requests == 1


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


class TestSummarize:
    def test_empty(self) -> None:
        summary = summarize([])
        assert summary.total_requests == 0
        assert summary.average_ms == 0.0
        assert summary.slowest_endpoints == ()

    def test_percentiles_on_hundred_values(self) -> None:
        summary = summarize([_metric(float(v)) for v in range(1, 101)])
        assert summary.total_requests == 100
        assert summary.average_ms == pytest.approx(50.5)
        assert summary.median_ms == 51.0
        assert summary.p95_ms == 96.0
        assert summary.p99_ms == 100.0

    def test_single_value(self) -> None:
        summary = summarize([_metric(42.0)])
        assert summary.median_ms == summary.p95_ms == summary.p99_ms == 42.0

    def test_rates(self) -> None:
        summary = summarize(
            [
                _metric(cache_hit=True, compressed=True),
                _metric(cache_hit=False, compressed=True),
                _metric(error_message="boom"),
                _metric(cached=True),
            ]
        )
        assert summary.cache_hit_rate == 50.0
        assert summary.compression_rate == 50.0
        assert summary.error_rate == 25.0

    def test_slowest_endpoints_top_five_by_average(self) -> None:
        metrics = [_metric(float(i * 10), endpoint=f"/e{i}") for i in range(7)]
        metrics.append(_metric(70.0, endpoint="/e0"))
        summary = summarize(metrics)
        names = [e.endpoint for e in summary.slowest_endpoints]
        assert names == ["/e6", "/e5", "/e4", "/e0", "/e3"]
        e0 = next(e for e in summary.slowest_endpoints if e.endpoint == "/e0")
        assert e0.avg_duration_ms == 35.0
        assert e0.count == 2

    def test_to_dict_keys(self) -> None:
        data = summarize([_metric()]).to_dict()
        assert set(data) == {
            "totalRequests",
            "averageResponseTime",
            "medianResponseTime",
            "p95ResponseTime",
            "p99ResponseTime",
            "cacheHitRate",
            "compressionRate",
            "errorRate",
            "slowestEndpoints",
        }


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------


class TestReport:
    def test_format_summary(self) -> None:
        text = format_summary(summarize([_metric(12.5)]))
        assert "Total Requests: 1" in text
        assert "Average: 12.50ms" in text
        assert "/api/search/institutions: 12.50ms (1 requests)" in text

    def test_render_report(self) -> None:
        stats = CacheStats(hits=3, misses=1, size=2, backend=CacheBackendKind.REMOTE)
        text = render_report(
            stats, PerformanceSummary.empty(), 0, 15, datetime(2026, 1, 1, tzinfo=UTC)
        )
        assert text.startswith("=== Cache Metrics ===")
        assert "Type: remote" in text
        assert "Hit Rate: 75.00%" in text
        assert "Size: 2 entries" in text
        assert "Time Range: Last 15 minutes" in text
        assert "Generated: 2026-01-01T00:00:00+00:00" in text


# ---------------------------------------------------------------------------
# Immediate log events on record()
# ---------------------------------------------------------------------------


class TestRecordLogging:
    def test_slow_request_logged(self) -> None:
        collector = MetricsCollector(slow_request_ms=500, clock=FrozenClock())
        with capture_logs() as logs:
            collector.record(_metric(750.456))
        assert logs == [
            {
                "event": "request.slow",
                "log_level": "warning",
                "method": "GET",
                "endpoint": "/api/search/institutions",
                "duration_ms": 750.46,
            }
        ]

    def test_threshold_itself_is_not_slow(self) -> None:
        collector = MetricsCollector(slow_request_ms=500, clock=FrozenClock())
        with capture_logs() as logs:
            collector.record(_metric(500.0))
        assert logs == []

    def test_failed_request_logged(self) -> None:
        collector = MetricsCollector(clock=FrozenClock())
        with capture_logs() as logs:
            collector.record(_metric(error_message="connection refused"))
        assert [e["event"] for e in logs] == ["request.failed"]
        assert logs[0]["log_level"] == "error"
        assert logs[0]["error"] == "connection refused"
        assert logs[0]["status_code"] == 200

    def test_slow_and_failed_both_logged(self) -> None:
        collector = MetricsCollector(slow_request_ms=100, clock=FrozenClock())
        with capture_logs() as logs:
            collector.record(_metric(250.0, error_message="HTTP 504"))
        assert [e["event"] for e in logs] == ["request.slow", "request.failed"]

    def test_fast_successful_request_logs_nothing(self) -> None:
        collector = MetricsCollector(clock=FrozenClock())
        with capture_logs() as logs:
            collector.record(_metric(12.0))
        assert logs == []
        assert collector.count() == 1
