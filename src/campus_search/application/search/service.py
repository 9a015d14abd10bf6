"""Application search – InstitutionSearchService.

One request runs expand -> cache lookup -> fetch -> refine -> store. Cache
failures degrade to a miss inside :class:`ResponseCache`; data-source
failures propagate to the caller unchanged.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from campus_search.application.cache import CacheKey, CacheTTL, ResponseCache
from campus_search.application.search.criteria import FilterState
from campus_search.application.search.expander import QueryExpander
from campus_search.application.search.filters import FilterEngine
from campus_search.application.search.institution import Institution
from campus_search.application.search.params import FilterQuery
from campus_search.application.search.ports import DataSource
from campus_search.kernel.errors import TimeoutError as FetchTimeoutError
from campus_search.observability.logging import get_logger

__all__ = ["InstitutionSearchService", "SearchOutcome", "SearchRequest"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchRequest:
    text: str = ""
    filters: FilterState = field(default_factory=FilterState)
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")


@dataclass(frozen=True)
class SearchOutcome:
    payload: dict[str, Any]
    cache_hit: bool
    expression: str
    cache_key: str


class InstitutionSearchService:
    def __init__(
        self,
        data_source: DataSource,
        cache: ResponseCache,
        *,
        expander: QueryExpander | None = None,
        engine: FilterEngine | None = None,
        ttl: int = CacheTTL.SEARCH_RESULTS,
        fetch_timeout: float | None = None,
    ) -> None:
        self._source = data_source
        self._cache = cache
        self._expander = expander or QueryExpander()
        self._engine = engine or FilterEngine()
        self._ttl = ttl
        self._fetch_timeout = fetch_timeout

    async def search(self, request: SearchRequest) -> SearchOutcome:
        expression = self._expander.build_boolean_expression(request.text)
        key = CacheKey.for_search(expression, request.filters, request.page, request.page_size)

        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("search.cache_hit", key=key)
            return SearchOutcome(payload=cached, cache_hit=True, expression=expression, cache_key=key)

        constraints = FilterQuery.from_state(request.filters).to_constraints()
        fetch = self._source.fetch(expression, constraints, request.page, request.page_size)
        if self._fetch_timeout is None:
            page = await fetch
        else:
            try:
                async with asyncio.timeout(self._fetch_timeout):
                    page = await fetch
            except asyncio.TimeoutError as exc:
                raise FetchTimeoutError(
                    f"data source did not answer within {self._fetch_timeout}s", cause=exc
                ) from exc

        candidates = [Institution.from_record(r) for r in page.records]
        result = self._engine.apply(candidates, request.filters)
        payload = {
            "institutions": [i.to_dict() for i in result.items],
            "total": page.total,
            "page": page.page,
            "limit": page.page_size,
            "totalPages": page.total_pages,
            "appliedFilters": result.applied_filters.to_dict(),
            "matchPercentage": result.match_percentage,
        }
        await self._cache.set(key, payload, self._ttl)
        logger.info(
            "search.completed",
            expression=expression,
            fetched=len(candidates),
            matched=result.total_count,
            total=page.total,
        )
        return SearchOutcome(payload=payload, cache_hit=False, expression=expression, cache_key=key)
