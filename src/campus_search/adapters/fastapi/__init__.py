"""FastAPI adapter – app factory, metrics middleware, exception mapper, routers, deps."""
from campus_search.adapters.fastapi.app import create_app
from campus_search.adapters.fastapi.deps import (
    get_clock,
    get_metrics_collector,
    get_negotiator,
    get_response_cache,
    get_search_service,
)
from campus_search.adapters.fastapi.exception_mapper import SearchExceptionMapper
from campus_search.adapters.fastapi.middleware import (
    PerformanceMetricsMiddleware,
    RequestPerformance,
    performance_of,
)
from campus_search.adapters.fastapi.routers import MetricsRouter, SearchRouter

__all__ = [
    "MetricsRouter",
    "PerformanceMetricsMiddleware",
    "RequestPerformance",
    "SearchExceptionMapper",
    "SearchRouter",
    "create_app",
    "get_clock",
    "get_metrics_collector",
    "get_negotiator",
    "get_response_cache",
    "get_search_service",
    "performance_of",
]
