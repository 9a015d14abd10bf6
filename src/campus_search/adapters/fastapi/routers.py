"""FastAPI adapter – search and metrics routers."""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from campus_search.adapters.fastapi.deps import (
    get_clock,
    get_metrics_collector,
    get_negotiator,
    get_response_cache,
    get_search_service,
)
from campus_search.adapters.fastapi.middleware import performance_of
from campus_search.application.cache import ResponseCache
from campus_search.application.compression import CompressionNegotiator
from campus_search.application.search import (
    FilterQuery,
    InstitutionSearchService,
    SearchRequest,
    reserved_tokens,
)
from campus_search.kernel.errors import ValidationError
from campus_search.kernel.time import Clock
from campus_search.observability.metrics import MetricsCollector, render_report


def SearchRouter(prefix: str = "/api/search", tags: list[str] | None = None) -> APIRouter:
    """``GET {prefix}/institutions`` – synonym-expanded, filtered, cached search.

    Besides ``q``/``page``/``limit`` the route reads the flat filter
    parameters (``countries``, ``costMin`` ...) straight from the query
    string. Words carrying full-text operator characters (``!``, ``&``,
    ``(``, an apostrophe ...) are rejected with 400.
    """
    router = APIRouter(prefix=prefix, tags=tags or ["search"])

    @router.get("/institutions")
    async def search_institutions(
        request: Request,
        q: str = Query(default="", description="Free-text query"),
        page: int = Query(default=1, ge=1, description="1-based page number"),
        limit: int = Query(default=20, ge=1, le=1000, description="Items per page"),
        service: InstitutionSearchService = Depends(get_search_service),
        negotiator: CompressionNegotiator = Depends(get_negotiator),
    ) -> Response:
        rejected = reserved_tokens(q)
        if rejected:
            raise ValidationError(
                "Invalid search text",
                errors=[
                    {"param": "q", "value": token, "reason": "contains a full-text operator character"}
                    for token in rejected
                ],
            )
        filters = FilterQuery.from_params(request.query_params)
        outcome = await service.search(
            SearchRequest(text=q, filters=filters.to_state(), page=page, page_size=limit)
        )

        perf = performance_of(request)
        perf.cached = outcome.cache_hit
        perf.cache_hit = outcome.cache_hit

        negotiated = await negotiator.negotiate_async(request.headers.get("accept-encoding"), outcome.payload)
        perf.compressed = negotiated.stats.compressed
        perf.compression_ratio = negotiated.stats.ratio if negotiated.stats.compressed else None

        headers = {**negotiated.headers, "X-Cache": "HIT" if outcome.cache_hit else "MISS"}
        return Response(content=negotiated.body, headers=headers)

    return router


def MetricsRouter(prefix: str = "/api/admin", tags: list[str] | None = None) -> APIRouter:
    """``GET {prefix}/metrics`` – cache statistics and request performance."""
    router = APIRouter(prefix=prefix, tags=tags or ["ops"])

    @router.get("/metrics")
    async def metrics(
        minutes: float = Query(default=60, gt=0, description="Trailing window in minutes"),
        format: Literal["json", "text"] = Query(default="json"),  # noqa: A002
        cache: ResponseCache = Depends(get_response_cache),
        collector: MetricsCollector = Depends(get_metrics_collector),
        clock: Clock = Depends(get_clock),
    ) -> Response:
        cache_stats = await cache.stats()
        summary = collector.summary(window_minutes=minutes)
        metric_count = collector.count()
        generated_at = clock.now()

        if format == "text":
            return PlainTextResponse(
                render_report(cache_stats, summary, metric_count, minutes, generated_at)
            )
        return JSONResponse(
            {
                "cache": cache_stats.to_dict(),
                "performance": summary.to_dict(),
                "metricCount": metric_count,
                "timeRange": f"Last {minutes:g} minutes",
                "timestamp": generated_at.isoformat(),
            }
        )

    return router


__all__ = ["MetricsRouter", "SearchRouter"]
