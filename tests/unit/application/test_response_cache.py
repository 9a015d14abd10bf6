"""Unit tests for ResponseCache, the in-process backend and backend selection."""
from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from campus_search.application.cache import (
    CacheBackendKind,
    CacheKey,
    CacheNamespace,
    CacheStats,
    CacheTTL,
    InMemoryCacheBackend,
    ResponseCache,
    create_response_cache,
    invalidate_institution_cache,
)
from campus_search.application.search import FilterState
from campus_search.config import SearchSettings
from campus_search.kernel.time import FrozenClock
from campus_search.resilience.retry import RetryPolicy


def _cache(clock: FrozenClock | None = None, **kwargs: Any) -> tuple[ResponseCache, FrozenClock]:
    clock = clock or FrozenClock()
    return ResponseCache(InMemoryCacheBackend(clock), **kwargs), clock


class _BrokenBackend:
    async def get(self, key: str) -> Any:
        raise OSError("backend down")

    async def set(self, key: str, value: Any, ttl: int) -> None:
        raise OSError("backend down")

    async def delete(self, key: str) -> None:
        raise OSError("backend down")

    async def delete_pattern(self, pattern: str) -> int:
        raise OSError("backend down")

    async def clear(self, prefix: str = "") -> None:
        raise OSError("backend down")

    async def size(self, prefix: str = "") -> int:
        raise OSError("backend down")

    async def close(self) -> None:
        return None


# ---------------------------------------------------------------------------
# CacheStats / CacheKey
# ---------------------------------------------------------------------------


class TestCacheStats:
    def test_hit_rate_zero_without_lookups(self) -> None:
        assert CacheStats(0, 0, 0, CacheBackendKind.LOCAL).hit_rate == 0.0

    def test_hit_rate_percent(self) -> None:
        stats = CacheStats(3, 1, 2, CacheBackendKind.REMOTE)
        assert stats.hit_rate == 75.0
        assert stats.to_dict() == {"hits": 3, "misses": 1, "size": 2, "type": "remote", "hitRate": 75.0}


class TestCacheKey:
    def test_build_joins_with_colons(self) -> None:
        assert CacheKey.build("search", "abc", 1, 20) == "search:abc:1:20"

    def test_for_search_shape(self) -> None:
        key = CacheKey.for_search("(cal | california) & tech", FilterState(), 2, 20)
        assert key.startswith('search:"(cal | california) & tech":')
        assert key.endswith(":2:20")

    def test_for_search_distinguishes_every_part(self) -> None:
        state = FilterState()
        located = FilterState(locations=state.locations.with_values("CA"))
        keys = {
            CacheKey.for_search("tech", state, 1, 20),
            CacheKey.for_search("tech", state, 2, 20),
            CacheKey.for_search("tech", state, 1, 10),
            CacheKey.for_search("tech", located, 1, 20),
            CacheKey.for_search("tech:1", state, 1, 20),
            CacheKey.for_search("", state, 1, 20),
        }
        assert len(keys) == 6

    def test_for_search_is_deterministic(self) -> None:
        assert CacheKey.for_search("x", FilterState(), 1, 20) == CacheKey.for_search("x", FilterState(), 1, 20)

    def test_ttl_constants(self) -> None:
        assert CacheTTL.SEARCH_RESULTS == 180
        assert CacheTTL.INSTITUTION_LIST == 300
        assert CacheTTL.INSTITUTION_DETAIL == 3600
        assert CacheTTL.FILTERS == 1800
        assert CacheKey.for_institution(7) == f"{CacheNamespace.INSTITUTION_DETAIL}:7"


# ---------------------------------------------------------------------------
# ResponseCache over the in-process backend
# ---------------------------------------------------------------------------


class TestResponseCache:
    def test_round_trip_then_expiry(self) -> None:
        async def run() -> None:
            cache, clock = _cache()
            await cache.set("k", {"v": 1}, ttl=60)
            assert await cache.get("k") == {"v": 1}
            clock.advance(seconds=61)
            assert await cache.get("k") is None
        asyncio.run(run())

    def test_default_ttl_applies(self) -> None:
        async def run() -> None:
            cache, clock = _cache(default_ttl=10)
            await cache.set("k", "v")
            clock.advance(seconds=9)
            assert await cache.get("k") == "v"
            clock.advance(seconds=2)
            assert await cache.get("k") is None
        asyncio.run(run())

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_non_positive_ttl_rejected(self, ttl: int) -> None:
        async def run() -> None:
            cache, _ = _cache(default_ttl=10)
            with pytest.raises(ValueError):
                await cache.set("k", "v", ttl=ttl)
            assert await cache.get("k") is None
        asyncio.run(run())

    def test_non_positive_default_ttl_rejected(self) -> None:
        with pytest.raises(ValueError):
            ResponseCache(InMemoryCacheBackend(FrozenClock()), default_ttl=0)

    def test_counters(self) -> None:
        async def run() -> None:
            cache, _ = _cache()
            await cache.get("missing")
            await cache.set("k", 1)
            await cache.get("k")
            await cache.get("k")
            stats = await cache.stats()
            assert (stats.hits, stats.misses, stats.size) == (2, 1, 1)
            assert stats.backend is CacheBackendKind.LOCAL
        asyncio.run(run())

    def test_keys_are_prefixed(self) -> None:
        async def run() -> None:
            backend = InMemoryCacheBackend(FrozenClock())
            cache = ResponseCache(backend, key_prefix="university:")
            await cache.set("search:x", 1)
            assert await backend.get("university:search:x") == 1
        asyncio.run(run())

    def test_delete(self) -> None:
        async def run() -> None:
            cache, _ = _cache()
            await cache.set("k", 1)
            await cache.delete("k")
            assert await cache.get("k") is None
        asyncio.run(run())

    def test_delete_pattern(self) -> None:
        async def run() -> None:
            cache, _ = _cache()
            await cache.set("institutions:all", 1)
            await cache.set("institutions:{}", 2)
            await cache.set("institution:7", 3)
            assert await cache.delete_pattern("institutions:*") == 2
            assert await cache.get("institution:7") == 3
        asyncio.run(run())

    @pytest.mark.parametrize("pattern", ["institutions", "*:all", "a*b*", "**"])
    def test_delete_pattern_rejects_non_prefix_globs(self, pattern: str) -> None:
        cache, _ = _cache()
        with pytest.raises(ValueError):
            asyncio.run(cache.delete_pattern(pattern))

    def test_clear_resets_counters_and_entries(self) -> None:
        async def run() -> None:
            cache, _ = _cache()
            await cache.set("k", 1)
            await cache.get("k")
            await cache.clear()
            stats = await cache.stats()
            assert (stats.hits, stats.misses, stats.size) == (0, 0, 0)
        asyncio.run(run())

    def test_stats_sweeps_expired_entries(self) -> None:
        async def run() -> None:
            cache, clock = _cache()
            await cache.set("short", 1, ttl=5)
            await cache.set("long", 1, ttl=500)
            clock.advance(seconds=10)
            assert (await cache.stats()).size == 1
        asyncio.run(run())

    def test_clear_leaves_other_prefixes(self) -> None:
        async def run() -> None:
            backend = InMemoryCacheBackend(FrozenClock())
            ours = ResponseCache(backend, key_prefix="a:")
            theirs = ResponseCache(backend, key_prefix="b:")
            await ours.set("k", 1)
            await theirs.set("k", 2)
            await ours.clear()
            assert await theirs.get("k") == 2
        asyncio.run(run())

    def test_invalidate_institution_cache(self) -> None:
        async def run() -> None:
            cache, _ = _cache()
            await cache.set(CacheKey.for_institution(7), {"id": 7})
            await cache.set(CacheKey.for_institution_list(), [7])
            await cache.set(CacheKey.for_institution_list({"state": "CA"}), [7])
            removed = await invalidate_institution_cache(cache, 7)
            assert removed == 2
            assert await cache.get(CacheKey.for_institution(7)) is None
        asyncio.run(run())


class TestBackendFailures:
    def test_failures_degrade_to_miss_and_noop(self) -> None:
        async def run() -> None:
            cache = ResponseCache(_BrokenBackend(), CacheBackendKind.REMOTE)
            await cache.set("k", 1)
            assert await cache.get("k") is None
            await cache.delete("k")
            assert await cache.delete_pattern("k*") == 0
            await cache.clear()
            stats = await cache.stats()
            assert stats.size == 0
            assert stats.backend is CacheBackendKind.REMOTE
        asyncio.run(run())

    def test_failed_get_counts_as_miss(self) -> None:
        async def run() -> None:
            cache = ResponseCache(_BrokenBackend())
            await cache.get("a")
            await cache.get("b")
            assert (await cache.stats()).misses == 2
        asyncio.run(run())


# ---------------------------------------------------------------------------
# create_response_cache
# ---------------------------------------------------------------------------


def _fast_retry(attempts: int = 3) -> RetryPolicy:
    return RetryPolicy(max_attempts=attempts, initial_delay=0, increment=0, max_delay=0)


def _patched_redis(ping: AsyncMock) -> tuple[Any, MagicMock]:
    client = MagicMock()
    client.ping = ping
    client.aclose = AsyncMock()
    aioredis = MagicMock()
    aioredis.from_url = MagicMock(return_value=client)
    import campus_search.adapters.redis.cache as cache_mod

    return patch.object(cache_mod, "_require_redis", return_value=aioredis), client


class TestCreateResponseCache:
    def test_without_url_uses_local_backend(self) -> None:
        cache = asyncio.run(create_response_cache(SearchSettings()))
        assert cache.backend_kind is CacheBackendKind.LOCAL
        assert cache.key_prefix == "university:"

    def test_reachable_redis_selected(self) -> None:
        patcher, client = _patched_redis(AsyncMock(return_value=True))
        with patcher:
            cache = asyncio.run(
                create_response_cache(SearchSettings(redis_url="redis://cache:6379"), retry=_fast_retry())
            )
        assert cache.backend_kind is CacheBackendKind.REMOTE
        client.ping.assert_awaited_once()

    def test_unreachable_redis_falls_back_after_budget(self) -> None:
        patcher, client = _patched_redis(AsyncMock(side_effect=OSError("refused")))
        with patcher:
            cache = asyncio.run(
                create_response_cache(SearchSettings(redis_url="redis://cache:6379"), retry=_fast_retry(3))
            )
        assert cache.backend_kind is CacheBackendKind.LOCAL
        assert client.ping.await_count == 3
        client.aclose.assert_awaited_once()

    def test_recovers_within_budget(self) -> None:
        patcher, _ = _patched_redis(AsyncMock(side_effect=[OSError("refused"), True]))
        with patcher:
            cache = asyncio.run(
                create_response_cache(SearchSettings(redis_url="redis://cache:6379"), retry=_fast_retry(3))
            )
        assert cache.backend_kind is CacheBackendKind.REMOTE
