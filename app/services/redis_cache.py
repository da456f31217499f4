"""
Redis Cache - Best Outgoing Student Award Portal
app/services/redis_cache.py

Pydantic models cached as camelCase JSON with a TTL.
"""
import redis
from typing import Optional, TypeVar, Type
from pydantic import BaseModel
from app.config import settings

T = TypeVar("T", bound=BaseModel)


class RedisCache:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
        )

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Cached value parsed back into ``model``, or None on a miss."""
        raw = self.client.get(key)
        return model.model_validate_json(raw) if raw else None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        # Aliased dump so the payload parses with the same validators as stored rows
        self.client.setex(key, ttl_seconds, value.model_dump_json(by_alias=True))

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching ``pattern``; returns how many were removed."""
        keys = list(self.client.scan_iter(match=pattern))
        return self.client.delete(*keys) if keys else 0
