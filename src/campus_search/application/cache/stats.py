"""Application cache – CacheStats."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = ["CacheBackendKind", "CacheStats"]


class CacheBackendKind(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    size: int
    backend: CacheBackendKind

    @property
    def hit_rate(self) -> float:
        """Percentage of lookups served from cache; 0 before any lookup."""
        lookups = self.hits + self.misses
        return self.hits / lookups * 100 if lookups else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "type": self.backend.value,
            "hitRate": round(self.hit_rate, 2),
        }
