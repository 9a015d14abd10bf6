"""Application cache – in-process backend."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from campus_search.kernel.time import Clock, SystemClock

__all__ = ["CacheEntry", "InMemoryCacheBackend"]


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float

    def expired(self, now: float) -> bool:
        return now > self.expires_at


class InMemoryCacheBackend:
    """Dict-backed store with per-entry expiry.

    Expired entries read as misses and are dropped; :meth:`size` sweeps the
    rest. Safe to share between the event loop and worker threads.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._data: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Any | None:
        now = self._clock.timestamp()
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expired(now):
                del self._data[key]
                return None
            return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        entry = CacheEntry(value=value, expires_at=self._clock.timestamp() + ttl)
        with self._lock:
            self._data[key] = entry

    async def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching *pattern*, a prefix followed by one ``*``."""
        prefix = pattern.removesuffix("*")
        with self._lock:
            doomed = [k for k in self._data if k.startswith(prefix)]
            for key in doomed:
                del self._data[key]
        return len(doomed)

    async def clear(self, prefix: str = "") -> None:
        await self.delete_pattern(f"{prefix}*")

    async def size(self, prefix: str = "") -> int:
        now = self._clock.timestamp()
        with self._lock:
            for key in [k for k, e in self._data.items() if e.expired(now)]:
                del self._data[key]
            return sum(1 for k in self._data if k.startswith(prefix))

    async def close(self) -> None:
        return None
