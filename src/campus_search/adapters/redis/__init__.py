"""Redis adapter – remote cache backend."""
from campus_search.adapters.redis.cache import RedisCacheBackend, scan_match

__all__ = ["RedisCacheBackend", "scan_match"]
