"""Persistent record store protocol.

The persistent store owns every domain record (users, tasks, newsletters).
The rest of the application only sees plain dictionaries whose values are
JSON-native (datetimes are ISO-8601 strings), addressed by collection name
and primary key.
"""

from typing import Any, Protocol, runtime_checkable

Record = dict[str, Any]


class RecordStoreError(Exception):
    """Raised when the persistent store cannot complete an operation."""


class DuplicateRecordError(RecordStoreError):
    """Raised when a write violates a unique constraint."""


class UnknownCollectionError(RecordStoreError):
    """Raised when a collection name is not mapped to a table."""


@runtime_checkable
class RecordStore(Protocol):
    """Protocol for the persistent store adapter.

    Example:
        ```python
        from newsletter_api.protocols import RecordStore

        store: RecordStore = SqlRecordStore(db_manager)
        tasks = await store.find_all("tasks")
        ```
    """

    async def find_all(self, collection: str) -> list[Record]:
        """Return every record of a collection ordered by primary key."""
        ...

    async def find_by_key(self, collection: str, key: int) -> Record | None:
        """Return the record with the given primary key, or None."""
        ...

    async def find_one(self, collection: str, **fields: Any) -> Record | None:
        """Return the first record whose fields equal the given values, or None."""
        ...

    async def create(self, collection: str, values: Record) -> Record:
        """Insert a record and return it as stored (with generated fields).

        Raises:
            DuplicateRecordError: If a unique field already holds the value
        """
        ...

    async def update(self, collection: str, key: int, values: Record) -> Record | None:
        """Update fields of a record and return it, or None if absent."""
        ...

    async def delete(self, collection: str, key: int) -> bool:
        """Delete a record. Returns True if a record was removed."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
