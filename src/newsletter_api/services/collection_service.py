"""Cached collection services for tasks and newsletters.

List reads go through the cache-aside repository. Every successful create,
update and delete invalidates the collection's list key before returning,
and never touches the cache when the mutation did not happen.
"""

from typing import Any

from newsletter_api.entities import CacheRead, RequestContext
from newsletter_api.errors import ForbiddenError, NotFoundError
from newsletter_api.logging import get_logger
from newsletter_api.protocols import Record, RecordStore
from newsletter_api.repositories import CacheAsideRepository, list_key

logger = get_logger(__name__)


class CollectionService:
    """Read-through listing and invalidating mutations for one collection."""

    collection: str = ""
    resource_name: str = "Record"

    def __init__(self, records: RecordStore, cache: CacheAsideRepository, list_ttl: int = 60) -> None:
        """Initialize the service.

        Args:
            records: Persistent store adapter (authoritative data).
            cache: Cache-aside repository for list snapshots.
            list_ttl: Snapshot time-to-live in seconds.
        """
        self._records = records
        self._cache = cache
        self._list_ttl = list_ttl

    @property
    def cache_key(self) -> str:
        return list_key(self.collection)

    async def list(self) -> CacheRead:
        """List the collection through the cache."""
        return await self._cache.read_through(
            self.cache_key,
            lambda: self._records.find_all(self.collection),
            self._list_ttl,
        )

    async def get(self, record_id: int) -> Record:
        """Get one record straight from the persistent store."""
        record = await self._records.find_by_key(self.collection, record_id)
        if record is None:
            raise NotFoundError(self.resource_name)
        return record

    async def _create(self, values: dict[str, Any]) -> Record:
        record = await self._records.create(self.collection, values)
        await self._cache.invalidate(self.cache_key)
        logger.info("record_created", collection=self.collection, id=record.get("id"))
        return record

    async def _update(self, record_id: int, values: dict[str, Any]) -> Record:
        record = await self._records.update(self.collection, record_id, values)
        if record is None:
            raise NotFoundError(self.resource_name)
        await self._cache.invalidate(self.cache_key)
        logger.info("record_updated", collection=self.collection, id=record_id, fields=sorted(values))
        return record

    async def _delete(self, record_id: int) -> None:
        if not await self._records.delete(self.collection, record_id):
            raise NotFoundError(self.resource_name)
        await self._cache.invalidate(self.cache_key)
        logger.info("record_deleted", collection=self.collection, id=record_id)


class TaskService(CollectionService):
    """Tasks: public, unauthenticated collection."""

    collection = "tasks"
    resource_name = "Task"

    async def create(self, description: str) -> Record:
        return await self._create({"description": description, "completed": False})

    async def update(self, task_id: int, values: dict[str, Any]) -> Record:
        return await self._update(task_id, values)

    async def delete(self, task_id: int) -> None:
        await self._delete(task_id)


class NewsletterService(CollectionService):
    """Newsletters: authored by users, mutations are ownership-checked.

    Ownership is always read from the persistent store, never from a cached
    snapshot.
    """

    collection = "newsletters"
    resource_name = "Newsletter"

    async def create(
        self,
        context: RequestContext,
        title: str,
        description: str,
        image_url: str | None = None,
    ) -> Record:
        return await self._create(
            {
                "title": title,
                "description": description,
                "image_url": image_url,
                "author_id": context.subject_id,
            }
        )

    async def update(self, context: RequestContext, newsletter_id: int, values: dict[str, Any]) -> Record:
        await self._load_owned(context, newsletter_id)
        return await self._update(newsletter_id, values)

    async def delete(self, context: RequestContext, newsletter_id: int) -> None:
        await self._load_owned(context, newsletter_id)
        await self._delete(newsletter_id)

    async def _load_owned(self, context: RequestContext, newsletter_id: int) -> Record:
        record = await self.get(newsletter_id)
        if record.get("author_id") != context.subject_id:
            logger.info(
                "ownership_denied",
                collection=self.collection,
                id=newsletter_id,
                subject_id=context.subject_id,
            )
            raise ForbiddenError()
        return record
