"""FastAPI adapter – PerformanceMetricsMiddleware.

Pure ASGI middleware: exactly one :class:`PerformanceMetric` per HTTP
request, recorded once the response has been sent. Routes and exception
handlers annotate the request through a :class:`RequestPerformance` stored
at ``request.state.performance``.
"""
from __future__ import annotations

import dataclasses
import time
from typing import TYPE_CHECKING, Any

from campus_search.observability.logging import bind_request_context, clear_request_context, get_logger
from campus_search.observability.metrics import MetricsCollector, PerformanceMetric

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

__all__ = ["PerformanceMetricsMiddleware", "RequestPerformance", "performance_of"]

logger = get_logger(__name__)

STATE_KEY = "performance"


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'fastapi' to use the FastAPI adapter") from exc


@dataclasses.dataclass
class RequestPerformance:
    """Per-request flags filled in while the response is produced."""

    cached: bool = False
    cache_hit: bool | None = None
    compressed: bool = False
    compression_ratio: float | None = None
    error_message: str | None = None


def performance_of(request: Any) -> RequestPerformance:
    """The request's :class:`RequestPerformance`, created on first use."""
    state = request.scope.setdefault("state", {})
    perf = state.get(STATE_KEY)
    if perf is None:
        perf = state[STATE_KEY] = RequestPerformance()
    return perf


class PerformanceMetricsMiddleware:
    """Record request latency and cache/compression flags.

    The collector is taken from the constructor or, when omitted, from
    ``app.state.metrics_collector`` at request time so it can be built in
    the lifespan.
    """

    def __init__(self, app: "ASGIApp", collector: MetricsCollector | None = None) -> None:
        _require_fastapi()
        self.app = app
        self._collector = collector

    def _resolve_collector(self, scope: "Scope") -> MetricsCollector | None:
        if self._collector is not None:
            return self._collector
        app = scope.get("app")
        return getattr(getattr(app, "state", None), "metrics_collector", None)

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        perf = RequestPerformance()
        scope.setdefault("state", {})[STATE_KEY] = perf
        method = scope.get("method", "GET")
        path = scope.get("path", "")
        bind_request_context(endpoint=path, method=method)

        status_code = [500]
        start = time.perf_counter()

        async def send_capturing(message: Any) -> None:
            if message["type"] == "http.response.start":
                status_code[0] = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, send_capturing)
        except Exception as exc:
            perf.error_message = perf.error_message or str(exc) or type(exc).__name__
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self._record(scope, perf, path, method, status_code[0], duration_ms)
            clear_request_context()

    def _record(
        self,
        scope: "Scope",
        perf: RequestPerformance,
        path: str,
        method: str,
        status: int,
        duration_ms: float,
    ) -> None:
        collector = self._resolve_collector(scope)
        if collector is None:
            return
        error = perf.error_message
        if error is None and status >= 500:
            error = f"HTTP {status}"
        collector.record(
            PerformanceMetric(
                timestamp=collector.clock.timestamp(),
                endpoint=path,
                method=method,
                duration_ms=duration_ms,
                status_code=status,
                cached=perf.cached,
                compressed=perf.compressed,
                compression_ratio=perf.compression_ratio,
                cache_hit=perf.cache_hit,
                error_message=error,
            )
        )
