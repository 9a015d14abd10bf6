"""Redis adapter – RedisCacheBackend."""
from __future__ import annotations

import json
import re
from typing import Any

from campus_search.application.cache.stats import CacheBackendKind
from campus_search.kernel.errors import ConnectionError

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'redis' to use the Redis cache backend") from exc


def scan_match(prefix: str) -> str:
    """``SCAN MATCH`` pattern selecting exactly the keys that start with *prefix*."""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix) + "*"


class RedisCacheBackend:
    """Async Redis store; values are JSON documents, expiry via ``SET ... EX``.

    Patterns are a literal prefix plus one trailing ``*``, the same contract
    as the in-process backend, so glob characters in the prefix are escaped
    before they reach ``SCAN``.
    """

    kind = CacheBackendKind.REMOTE

    def __init__(self, url: str, *, scan_count: int = 500, **kwargs: Any) -> None:
        aioredis = _require_redis()
        self._client = aioredis.from_url(url, decode_responses=True, **kwargs)
        self._scan_count = scan_count

    async def ping(self) -> bool:
        from redis.exceptions import RedisError

        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as exc:
            raise ConnectionError("redis", f"Redis did not answer PING: {exc}", cause=exc) from exc

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(key, json.dumps(value, separators=(",", ":")), ex=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def delete_pattern(self, pattern: str) -> int:
        removed = 0
        batch: list[str] = []
        match = scan_match(pattern.removesuffix("*"))
        async for key in self._client.scan_iter(match=match, count=self._scan_count):
            batch.append(key)
            if len(batch) >= self._scan_count:
                removed += await self._client.delete(*batch)
                batch.clear()
        if batch:
            removed += await self._client.delete(*batch)
        return removed

    async def clear(self, prefix: str = "") -> None:
        await self.delete_pattern(f"{prefix}*")

    async def size(self, prefix: str = "") -> int:
        count = 0
        async for _ in self._client.scan_iter(match=scan_match(prefix), count=self._scan_count):
            count += 1
        return count

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisCacheBackend", "scan_match"]
