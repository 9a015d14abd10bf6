"""Application – search pipeline, response cache and compression (framework-agnostic)."""

from campus_search.application.cache import (
    CacheBackendKind,
    CacheKey,
    CacheStats,
    ResponseCache,
    create_response_cache,
)
from campus_search.application.compression import (
    CompressedPayload,
    CompressionNegotiator,
    CompressionOptions,
    ContentEncoding,
)
from campus_search.application.search import (
    FilterEngine,
    FilterQuery,
    FilterState,
    InstitutionSearchService,
    QueryExpander,
    SearchOutcome,
    SearchRequest,
    SynonymTable,
)

__all__ = [
    "CacheBackendKind",
    "CacheKey",
    "CacheStats",
    "CompressedPayload",
    "CompressionNegotiator",
    "CompressionOptions",
    "ContentEncoding",
    "FilterEngine",
    "FilterQuery",
    "FilterState",
    "InstitutionSearchService",
    "QueryExpander",
    "ResponseCache",
    "SearchOutcome",
    "SearchRequest",
    "SynonymTable",
    "create_response_cache",
]
