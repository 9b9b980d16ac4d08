"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-memory, SQLAlchemy → anything)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from newsletter_api.protocols import CacheStore, RecordStore

    cache: CacheStore = RedisCacheStore(client)
    records: RecordStore = SqlRecordStore(db_manager)
    ```
"""

from .cache_store import CacheStore, CacheUnavailableError
from .record_store import (
    DuplicateRecordError,
    Record,
    RecordStore,
    RecordStoreError,
    UnknownCollectionError,
)

__all__ = [
    "CacheStore",
    "CacheUnavailableError",
    "DuplicateRecordError",
    "Record",
    "RecordStore",
    "RecordStoreError",
    "UnknownCollectionError",
]
