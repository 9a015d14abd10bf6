"""Config settings – SearchSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from campus_search.config.settings.base import Settings
from campus_search.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class SearchSettings(Settings):
    """Runtime configuration, read from ``SEARCH_*`` environment variables.

    An empty ``redis_url`` selects the in-process cache from the start.
    """

    _prefix: ClassVar[str] = "SEARCH"

    redis_url: str = ""
    redis_connect_attempts: int = 4
    redis_connect_timeout: float = 5.0

    cache_key_prefix: str = "university:"
    cache_default_ttl: int = 3600
    search_cache_ttl: int = 180

    compression_threshold: int = 1024
    brotli_quality: int = 4
    gzip_level: int = 6

    metrics_capacity: int = 10_000
    slow_request_ms: float = 1000.0

    data_source_url: str = "http://localhost:3000"
    data_source_table: str = "institutions"
    data_source_timeout: float = 30.0

    log_level: str = "INFO"
    log_json: bool = True

    def _validate(self) -> None:
        if self.redis_connect_attempts < 1:
            raise InvalidSettingValueError(
                "redis_connect_attempts", self.redis_connect_attempts, "must be >= 1"
            )
        if self.cache_default_ttl <= 0:
            raise InvalidSettingValueError("cache_default_ttl", self.cache_default_ttl, "must be > 0")
        if self.search_cache_ttl <= 0:
            raise InvalidSettingValueError("search_cache_ttl", self.search_cache_ttl, "must be > 0")
        if self.compression_threshold < 0:
            raise InvalidSettingValueError(
                "compression_threshold", self.compression_threshold, "must be >= 0"
            )
        if not 0 <= self.brotli_quality <= 11:
            raise InvalidSettingValueError("brotli_quality", self.brotli_quality, "must be within 0..11")
        if not 0 <= self.gzip_level <= 9:
            raise InvalidSettingValueError("gzip_level", self.gzip_level, "must be within 0..9")
        if self.metrics_capacity < 1:
            raise InvalidSettingValueError("metrics_capacity", self.metrics_capacity, "must be >= 1")
        if self.data_source_timeout <= 0:
            raise InvalidSettingValueError(
                "data_source_timeout", self.data_source_timeout, "must be > 0"
            )


__all__ = ["SearchSettings"]
