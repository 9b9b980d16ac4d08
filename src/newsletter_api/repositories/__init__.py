"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the relational database)
behind protocol-based interfaces, plus the cache-aside repository that
combines them.

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from newsletter_api.protocols import CacheStore, RecordStore

from .cache_aside_repository import CacheAsideRepository, list_key
from .redis_repository import RedisCacheStore
from .sql_repository import SqlRecordStore, to_record

__all__ = [
    "CacheAsideRepository",
    "CacheStore",
    "RecordStore",
    "RedisCacheStore",
    "SqlRecordStore",
    "list_key",
    "to_record",
]
