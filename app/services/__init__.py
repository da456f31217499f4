"""
Services module for the Best Outgoing Student Award Portal.
"""

from app.services.cache import get_cache
from app.services.redis_cache import RedisCache
from app.services.snowflake import get_snowflake_connection

__all__ = [
    "get_cache",
    "RedisCache",
    "get_snowflake_connection",
]
