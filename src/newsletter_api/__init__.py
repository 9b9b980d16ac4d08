"""Newsletter API - newsletters and tasks behind a Redis cache-aside layer.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStore, RecordStore)
    - repositories: Data access implementations and the cache-aside repository
    - services: Business logic (tokens, cooldowns, accounts, collections)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from newsletter_api.repositories import CacheAsideRepository, RedisCacheStore

    cache = CacheAsideRepository(RedisCacheStore.create())
    result = await cache.read_through("tasks:list", load_tasks, ttl=60)
    ```

For HTTP API:
    ```python
    from newsletter_api.api.app import app
    ```
"""

from newsletter_api.config import get_redis_client, settings
from newsletter_api.entities import AuthError, Blocked, CacheOrigin, CacheRead, IdentityClaims, Ready, RequestContext
from newsletter_api.errors import AppError
from newsletter_api.protocols import CacheStore, RecordStore
from newsletter_api.repositories import CacheAsideRepository, RedisCacheStore, SqlRecordStore
from newsletter_api.services import CooldownLimiter, TokenService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "RecordStore",
    # Repositories (data access)
    "CacheAsideRepository",
    "RedisCacheStore",
    "SqlRecordStore",
    # Services (business logic)
    "CooldownLimiter",
    "TokenService",
    # Entities (domain models)
    "AuthError",
    "Blocked",
    "CacheOrigin",
    "CacheRead",
    "IdentityClaims",
    "Ready",
    "RequestContext",
    # Errors
    "AppError",
]
