"""
Applicant Cache - Best Outgoing Student Award Portal
app/services/cache.py

Process-wide RedisCache handle. When Redis cannot be reached the handle is
None and the repository reads straight from Snowflake.
"""
import redis
from typing import Optional
from app.services.redis_cache import RedisCache
from app.config import settings

# Seconds the full applicant list stays cached
TTL_APPLICANTS = settings.CACHE_TTL_APPLICANTS

_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """Shared RedisCache, or None while Redis is down (retried on the next call)."""
    global _cache
    if _cache is None:
        try:
            cache = RedisCache()
            cache.client.ping()
            _cache = cache
        except (redis.RedisError, ConnectionError):
            return None
    return _cache


def reset_cache() -> None:
    """Drop the shared handle; tests and reconnects start from scratch."""
    global _cache
    _cache = None
