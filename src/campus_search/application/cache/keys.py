"""Application cache – CacheKey builder, namespaces and TTLs."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from campus_search.application.search.criteria import FilterState

__all__ = ["CacheKey", "CacheNamespace", "CacheTTL"]


class CacheNamespace:
    INSTITUTIONS = "institutions"
    INSTITUTION_DETAIL = "institution"
    SEARCH_RESULTS = "search"
    FILTERS = "filters"


class CacheTTL:
    """Lifetimes in seconds."""

    INSTITUTION_LIST = 300
    INSTITUTION_DETAIL = 3600
    SEARCH_RESULTS = 180
    FILTERS = 1800


class CacheKey:
    """Factory for deterministic cache key strings."""

    @staticmethod
    def build(*parts: str | int) -> str:
        return ":".join(str(p) for p in parts)

    @staticmethod
    def for_search(expression: str, state: "FilterState", page: int, page_size: int) -> str:
        # JSON-encoding the expression keeps colons inside it from colliding
        return CacheKey.build(
            CacheNamespace.SEARCH_RESULTS,
            json.dumps(expression),
            state.cache_token(),
            page,
            page_size,
        )

    @staticmethod
    def for_institution(institution_id: int) -> str:
        return CacheKey.build(CacheNamespace.INSTITUTION_DETAIL, institution_id)

    @staticmethod
    def for_institution_list(filters: dict[str, object] | None = None) -> str:
        if not filters:
            return CacheKey.build(CacheNamespace.INSTITUTIONS, "all")
        return CacheKey.build(
            CacheNamespace.INSTITUTIONS, json.dumps(filters, sort_keys=True, default=str)
        )
