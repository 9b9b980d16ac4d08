"""Redis implementation of CacheStore.

Thin adapter over ``redis.asyncio`` that maps connection failures to
``CacheUnavailableError`` so callers can degrade without knowing about Redis.
"""

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from newsletter_api.config import Settings, get_redis_client
from newsletter_api.protocols import CacheUnavailableError

_UNAVAILABLE = (RedisConnectionError, RedisTimeoutError, OSError)


class RedisCacheStore:
    """Redis key-value store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    ``set(..., only_if_absent=True)`` maps to ``SET key value EX ttl NX``,
    which Redis executes atomically.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_client: asyncio Redis client, shared for the process lifetime.
        """
        self._client = redis_client

    @classmethod
    def create(cls, config: Settings | None = None) -> "RedisCacheStore":
        """Factory method to create a RedisCacheStore from settings.

        Args:
            config: Settings to read the Redis URL from. If None, uses global settings.

        Returns:
            Configured RedisCacheStore
        """
        return cls(get_redis_client(config))

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._client.get(key)
        except _UNAVAILABLE as e:
            raise CacheUnavailableError(f"GET {key} failed: {e}") from e

    async def set(self, key: str, value: bytes, ttl: int, only_if_absent: bool = False) -> bool:
        try:
            result = await self._client.set(key, value, ex=ttl, nx=only_if_absent)
        except _UNAVAILABLE as e:
            raise CacheUnavailableError(f"SET {key} failed: {e}") from e
        # SET ... NX replies nil when the key already exists
        return bool(result)

    async def delete(self, key: str) -> int:
        try:
            return int(await self._client.delete(key))
        except _UNAVAILABLE as e:
            raise CacheUnavailableError(f"DEL {key} failed: {e}") from e

    async def ttl(self, key: str) -> int:
        try:
            return int(await self._client.ttl(key))
        except _UNAVAILABLE as e:
            raise CacheUnavailableError(f"TTL {key} failed: {e}") from e

    async def expire(self, key: str, ttl: int) -> bool:
        try:
            return bool(await self._client.expire(key, ttl))
        except _UNAVAILABLE as e:
            raise CacheUnavailableError(f"EXPIRE {key} failed: {e}") from e

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
