"""Cache-aside repository: read-through population and write-path invalidation.

Collection snapshots are stored as UTF-8 JSON under one key per collection
(``"<collection>:list"``). The cache is write-invalidate: mutations only ever
delete the key, the next read repopulates it.

Known race: an ``invalidate`` can land between another request's loader call
and its cache write, so a just-deleted key may be repopulated with data that
predates the mutation. Staleness is bounded by the snapshot TTL.
"""

import json
from typing import Awaitable, Callable

from newsletter_api.entities import CacheOrigin, CacheRead
from newsletter_api.logging import get_logger
from newsletter_api.protocols import CacheStore, CacheUnavailableError, Record

Loader = Callable[[], Awaitable[list[Record]]]

logger = get_logger(__name__)


def list_key(collection: str) -> str:
    """Cache key holding the snapshot of a listable collection."""
    return f"{collection}:list"


def _serialize(records: list[Record]) -> bytes:
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class CacheAsideRepository:
    """Read-through / write-invalidate cache over a CacheStore.

    Example:
        ```python
        repo = CacheAsideRepository(cache_store)

        result = await repo.read_through(
            "tasks:list", lambda: record_store.find_all("tasks"), ttl=60
        )
        result.origin  # CacheOrigin.MISS on first call, HIT afterwards

        await record_store.create("tasks", {...})
        await repo.invalidate("tasks:list")
        ```
    """

    def __init__(self, cache_store: CacheStore) -> None:
        self._cache = cache_store

    async def read_through(self, key: str, loader: Loader, ttl: int) -> CacheRead:
        """Return the cached snapshot under ``key`` or load and populate it.

        The cache write only happens after ``loader`` returned successfully;
        loader exceptions propagate and leave the cache untouched. When the
        cache store is unreachable the loader result is returned without
        population.

        Args:
            key: Cache key of the snapshot
            loader: Coroutine function reading the authoritative records
            ttl: Snapshot time-to-live in seconds

        Returns:
            CacheRead with the records and whether they came from the cache
        """
        try:
            cached = await self._cache.get(key)
        except CacheUnavailableError as e:
            logger.warning("cache_degraded", key=key, operation="get", error=str(e))
            return CacheRead(records=await loader(), origin=CacheOrigin.MISS)

        if cached is not None:
            try:
                records = json.loads(cached)
            except (UnicodeDecodeError, json.JSONDecodeError):
                records = None
            if isinstance(records, list):
                logger.debug("cache_hit", key=key)
                return CacheRead(records=records, origin=CacheOrigin.HIT)
            logger.warning("cache_corrupt_value", key=key)

        records = await loader()
        logger.debug("cache_miss", key=key, count=len(records))

        try:
            await self._cache.set(key, _serialize(records), ttl)
        except CacheUnavailableError as e:
            logger.warning("cache_degraded", key=key, operation="set", error=str(e))

        return CacheRead(records=records, origin=CacheOrigin.MISS)

    async def invalidate(self, key: str) -> None:
        """Delete ``key`` unconditionally. Idempotent.

        An unreachable cache store is logged and ignored; whatever value it
        still holds expires with its TTL.
        """
        try:
            removed = await self._cache.delete(key)
        except CacheUnavailableError as e:
            logger.warning("cache_invalidate_failed", key=key, error=str(e))
            return
        logger.debug("cache_invalidated", key=key, removed=removed)
