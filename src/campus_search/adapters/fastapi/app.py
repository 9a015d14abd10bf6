"""FastAPI adapter – application factory.

Serve with::

    uvicorn --factory campus_search.adapters.fastapi.app:create_app

Components are built in the lifespan and kept on ``app.state``; anything
passed in explicitly is used as-is and left open on shutdown.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI

from campus_search import __version__
from campus_search.adapters.fastapi.exception_mapper import SearchExceptionMapper
from campus_search.adapters.fastapi.middleware import PerformanceMetricsMiddleware
from campus_search.adapters.fastapi.routers import MetricsRouter, SearchRouter
from campus_search.adapters.postgrest import PostgRESTDataSource
from campus_search.application.cache import ResponseCache, create_response_cache
from campus_search.application.compression import CompressionNegotiator, CompressionOptions
from campus_search.application.search import DataSource, InstitutionSearchService
from campus_search.config import EnvSettingsLoader, SearchSettings
from campus_search.kernel.time import Clock, SystemClock
from campus_search.observability.logging import configure_logging, get_logger
from campus_search.observability.metrics import MetricsCollector

__all__ = ["create_app"]

logger = get_logger(__name__)


def create_app(
    settings: SearchSettings | None = None,
    *,
    data_source: DataSource | None = None,
    cache: ResponseCache | None = None,
    collector: MetricsCollector | None = None,
    negotiator: CompressionNegotiator | None = None,
    clock: Clock | None = None,
    setup_logging: bool = True,
) -> FastAPI:
    settings = settings or EnvSettingsLoader().load(SearchSettings)
    clock = clock or SystemClock()
    if setup_logging:
        configure_logging(settings.log_level, json=settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        response_cache = cache or await create_response_cache(settings, clock=clock)
        source: Any = data_source or PostgRESTDataSource(
            settings.data_source_url,
            table=settings.data_source_table,
            timeout=settings.data_source_timeout,
        )

        app.state.settings = settings
        app.state.clock = clock
        app.state.response_cache = response_cache
        app.state.metrics_collector = collector or MetricsCollector(
            capacity=settings.metrics_capacity,
            slow_request_ms=settings.slow_request_ms,
            clock=clock,
        )
        app.state.negotiator = negotiator or CompressionNegotiator(
            CompressionOptions(
                threshold=settings.compression_threshold,
                brotli_quality=settings.brotli_quality,
                gzip_level=settings.gzip_level,
            )
        )
        app.state.search_service = InstitutionSearchService(
            source,
            response_cache,
            ttl=settings.search_cache_ttl,
            fetch_timeout=settings.data_source_timeout,
        )
        logger.info(
            "app.started",
            cache_backend=response_cache.backend_kind.value,
            data_source=type(source).__name__,
        )
        try:
            yield
        finally:
            if cache is None:
                await response_cache.close()
            if data_source is None:
                await source.aclose()
            logger.info("app.stopped")

    app = FastAPI(title="campus-search", version=__version__, lifespan=lifespan)
    app.add_middleware(PerformanceMetricsMiddleware, collector=collector)
    SearchExceptionMapper().register(app)
    app.include_router(SearchRouter())
    app.include_router(MetricsRouter())
    return app
