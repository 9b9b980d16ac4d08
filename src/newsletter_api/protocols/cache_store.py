"""Key-value cache store protocol.

Defines the primitive every cache-backed component builds on: get,
set-with-expiry (optionally only-if-absent), delete and remaining-TTL lookup.

Implementations can include:
- Redis (default)
- An in-memory store for tests
"""

from typing import Protocol, runtime_checkable


class CacheUnavailableError(Exception):
    """Raised by a cache store when the backend cannot be reached."""


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for key-value cache backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. All methods raise ``CacheUnavailableError``
    when the backend is unreachable.

    Example:
        ```python
        from newsletter_api.protocols import CacheStore

        store: CacheStore = RedisCacheStore(client)
        store: CacheStore = InMemoryCacheStore()
        ```
    """

    async def get(self, key: str) -> bytes | None:
        """Get the raw value stored under a key.

        Args:
            key: The cache key

        Returns:
            The stored bytes, or None when the key is absent or expired
        """
        ...

    async def set(self, key: str, value: bytes, ttl: int, only_if_absent: bool = False) -> bool:
        """Store a value with an expiry as a single atomic operation.

        Args:
            key: The cache key
            value: The bytes to store
            ttl: Time-to-live in seconds
            only_if_absent: Only write when the key does not exist

        Returns:
            True if the value was written, False if only_if_absent blocked it
        """
        ...

    async def delete(self, key: str) -> int:
        """Delete a key.

        Args:
            key: The cache key

        Returns:
            Number of keys removed (0 or 1)
        """
        ...

    async def ttl(self, key: str) -> int:
        """Get the remaining time-to-live of a key.

        Args:
            key: The cache key

        Returns:
            Remaining seconds; -1 if the key has no expiry; -2 if it is absent
        """
        ...

    async def expire(self, key: str, ttl: int) -> bool:
        """Set an expiry on an existing key.

        Returns:
            True if the key exists and the expiry was set
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
