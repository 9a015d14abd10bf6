"""FastAPI adapter – dependency functions reading components from ``app.state``.

The lifespan in :mod:`campus_search.adapters.fastapi.app` stores each
component under the attribute named here; routes ask for them through
``Depends`` instead of module globals.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request

from campus_search.application.cache import ResponseCache
from campus_search.application.compression import CompressionNegotiator
from campus_search.application.search import InstitutionSearchService
from campus_search.kernel.time import Clock
from campus_search.observability.metrics import MetricsCollector


def _component(request: Any, name: str) -> Any:
    try:
        return getattr(request.app.state, name)
    except AttributeError as exc:
        raise RuntimeError(f"app.state.{name} is not set; was the lifespan run?") from exc


def get_search_service(request: Request) -> InstitutionSearchService:
    return _component(request, "search_service")


def get_response_cache(request: Request) -> ResponseCache:
    return _component(request, "response_cache")


def get_metrics_collector(request: Request) -> MetricsCollector:
    return _component(request, "metrics_collector")


def get_negotiator(request: Request) -> CompressionNegotiator:
    return _component(request, "negotiator")


def get_clock(request: Request) -> Clock:
    return _component(request, "clock")


__all__ = [
    "get_clock",
    "get_metrics_collector",
    "get_negotiator",
    "get_response_cache",
    "get_search_service",
]
