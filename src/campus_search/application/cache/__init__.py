"""Application cache – response cache with remote/local backends."""
from campus_search.application.cache.invalidation import (
    invalidate_institution_cache,
    invalidate_search_results,
)
from campus_search.application.cache.keys import CacheKey, CacheNamespace, CacheTTL
from campus_search.application.cache.memory import CacheEntry, InMemoryCacheBackend
from campus_search.application.cache.response_cache import (
    CacheBackend,
    ResponseCache,
    create_response_cache,
)
from campus_search.application.cache.stats import CacheBackendKind, CacheStats

__all__ = [
    "CacheBackend",
    "CacheBackendKind",
    "CacheEntry",
    "CacheKey",
    "CacheNamespace",
    "CacheStats",
    "CacheTTL",
    "InMemoryCacheBackend",
    "ResponseCache",
    "create_response_cache",
    "invalidate_institution_cache",
    "invalidate_search_results",
]
