"""Redis-backed idempotency cache"""
from typing import Optional

import redis.asyncio as redis
import structlog

from app.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)


class CacheService:
    """
    Thin wrapper around Redis used to remember responses of idempotent requests.

    Cache failures are logged and reported as misses; they never fail a request.
    """

    _redis_client: Optional[redis.Redis] = None

    @classmethod
    async def get_redis_client(cls) -> redis.Redis:
        """
        Get or create Redis client singleton.

        Returns:
            Redis client instance
        """
        if cls._redis_client is None:
            cls._redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
        return cls._redis_client

    @classmethod
    async def close_redis_client(cls):
        """Close Redis connection"""
        if cls._redis_client:
            await cls._redis_client.aclose()
            cls._redis_client = None

    @staticmethod
    def idempotency_key(scope: str, key: str, owner: str) -> str:
        """
        Build the cache key for an idempotent request.

        Args:
            scope: Kind of request, e.g. "group_expense"
            key: Client-supplied Idempotency-Key header
            owner: Resource the request targets (e.g. group id)

        Returns:
            Cache key string
        """
        return f"idempotency:{scope}:{owner}:{key}"

    @classmethod
    async def get(cls, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if exists, None otherwise
        """
        try:
            client = await cls.get_redis_client()
            return await client.get(key)
        except redis.RedisError as e:
            logger.warning("cache_get_failed", key=key, error=str(e))
            return None

    @classmethod
    async def set(cls, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: idempotency_ttl_seconds)

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await cls.get_redis_client()
            await client.setex(key, ttl or settings.idempotency_ttl_seconds, value)
            return True
        except redis.RedisError as e:
            logger.warning("cache_set_failed", key=key, error=str(e))
            return False

    @classmethod
    async def health_check(cls) -> bool:
        """
        Check if Redis connection is healthy.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            client = await cls.get_redis_client()
            await client.ping()
            return True
        except (redis.RedisError, OSError):
            return False
