"""Application cache – ResponseCache facade and backend selection.

The facade prefixes keys, applies the default TTL, keeps hit/miss counters
and turns every backend failure into a logged miss or no-op: a broken cache
never fails a request.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from campus_search.application.cache.memory import InMemoryCacheBackend
from campus_search.application.cache.stats import CacheBackendKind, CacheStats
from campus_search.kernel.time import Clock
from campus_search.observability.logging import get_logger
from campus_search.resilience.retry import RetryPolicy

if TYPE_CHECKING:
    from campus_search.config.settings import SearchSettings

__all__ = ["CacheBackend", "ResponseCache", "create_response_cache"]

logger = get_logger(__name__)


@runtime_checkable
class CacheBackend(Protocol):
    """Raw store; keys arrive fully prefixed."""

    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any, ttl: int) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def delete_pattern(self, pattern: str) -> int: ...
    async def clear(self, prefix: str = "") -> None: ...
    async def size(self, prefix: str = "") -> int: ...
    async def close(self) -> None: ...


class ResponseCache:
    """Prefixed, TTL-bound key/value cache for response payloads."""

    def __init__(
        self,
        backend: CacheBackend,
        kind: CacheBackendKind = CacheBackendKind.LOCAL,
        *,
        key_prefix: str = "cache:",
        default_ttl: int = 3600,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be > 0, got {default_ttl}")
        self._backend = backend
        self._kind = kind
        self._prefix = key_prefix
        self._default_ttl = default_ttl
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    @property
    def backend_kind(self) -> CacheBackendKind:
        return self._kind

    @property
    def key_prefix(self) -> str:
        return self._prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _count(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    async def get(self, key: str) -> Any | None:
        try:
            value = await self._backend.get(self._full_key(key))
        except Exception as exc:
            logger.warning("cache.get.failed", key=key, backend=self._kind.value, error=str(exc))
            value = None
        self._count(value is not None)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* for *ttl* seconds, or the default TTL when *ttl* is ``None``.

        Raises :class:`ValueError` for a non-positive *ttl*.
        """
        if ttl is None:
            ttl = self._default_ttl
        elif ttl <= 0:
            raise ValueError(f"ttl must be > 0, got {ttl}")
        try:
            await self._backend.set(self._full_key(key), value, ttl)
        except Exception as exc:
            logger.warning("cache.set.failed", key=key, backend=self._kind.value, error=str(exc))

    async def delete(self, key: str) -> None:
        try:
            await self._backend.delete(self._full_key(key))
        except Exception as exc:
            logger.warning("cache.delete.failed", key=key, backend=self._kind.value, error=str(exc))

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key starting with *pattern* minus its trailing ``*``.

        Raises :class:`ValueError` unless ``*`` appears exactly once, last.
        """
        if not pattern.endswith("*") or "*" in pattern[:-1]:
            raise ValueError(f"pattern must be a prefix followed by a single '*': {pattern!r}")
        try:
            return await self._backend.delete_pattern(self._full_key(pattern))
        except Exception as exc:
            logger.warning(
                "cache.delete_pattern.failed", pattern=pattern, backend=self._kind.value, error=str(exc)
            )
            return 0

    async def clear(self) -> None:
        try:
            await self._backend.clear(self._prefix)
        except Exception as exc:
            logger.warning("cache.clear.failed", backend=self._kind.value, error=str(exc))
        with self._lock:
            self._hits = 0
            self._misses = 0

    async def stats(self) -> CacheStats:
        try:
            size = await self._backend.size(self._prefix)
        except Exception as exc:
            logger.warning("cache.stats.failed", backend=self._kind.value, error=str(exc))
            size = 0
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, size=size, backend=self._kind)

    async def close(self) -> None:
        await self._backend.close()


async def create_response_cache(
    settings: "SearchSettings",
    *,
    clock: Clock | None = None,
    retry: RetryPolicy | None = None,
) -> ResponseCache:
    """Pick the backend once for the lifetime of the returned cache.

    With ``settings.redis_url`` set, Redis must answer ``PING`` within the
    retry budget; otherwise the client is closed and the in-process backend
    is used with no later reconnection.
    """
    options = {"key_prefix": settings.cache_key_prefix, "default_ttl": settings.cache_default_ttl}

    if settings.redis_url:
        from campus_search.adapters.redis import RedisCacheBackend  # lazy import

        policy = retry or RetryPolicy(max_attempts=settings.redis_connect_attempts)
        backend: RedisCacheBackend | None = None
        try:
            backend = RedisCacheBackend(
                settings.redis_url, socket_connect_timeout=settings.redis_connect_timeout
            )
            await policy.execute_async(backend.ping, operation="cache.connect")
        except Exception as exc:
            logger.warning("cache.backend.fallback", reason=str(exc), attempts=policy.max_attempts)
            if backend is not None:
                await _close_quietly(backend)
        else:
            logger.info("cache.backend.selected", backend=CacheBackendKind.REMOTE.value)
            return ResponseCache(backend, CacheBackendKind.REMOTE, **options)
    else:
        logger.info("cache.backend.selected", backend=CacheBackendKind.LOCAL.value, reason="no redis_url")

    return ResponseCache(InMemoryCacheBackend(clock), CacheBackendKind.LOCAL, **options)


async def _close_quietly(backend: CacheBackend) -> None:
    try:
        await backend.close()
    except Exception as exc:
        logger.debug("cache.backend.close_failed", error=str(exc))
