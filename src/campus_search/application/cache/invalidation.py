"""Application cache – invalidation helpers for institution data."""
from __future__ import annotations

from campus_search.application.cache.keys import CacheKey, CacheNamespace
from campus_search.application.cache.response_cache import ResponseCache

__all__ = ["invalidate_institution_cache", "invalidate_search_results"]


async def invalidate_institution_cache(cache: ResponseCache, institution_id: int | None = None) -> int:
    """Drop one institution's detail entry (if given) and every cached list.

    Returns the number of list entries removed.
    """
    if institution_id is not None:
        await cache.delete(CacheKey.for_institution(institution_id))
    return await cache.delete_pattern(f"{CacheNamespace.INSTITUTIONS}:*")


async def invalidate_search_results(cache: ResponseCache) -> int:
    return await cache.delete_pattern(f"{CacheNamespace.SEARCH_RESULTS}:*")
