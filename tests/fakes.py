"""In-memory fakes for the CacheStore and RecordStore protocols."""

import copy
import math
from datetime import datetime, timezone
from typing import Any

from newsletter_api.protocols import (
    CacheUnavailableError,
    DuplicateRecordError,
    Record,
    RecordStoreError,
    UnknownCollectionError,
)


class FakeClock:
    """Manually advanced Unix clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCacheStore:
    """CacheStore with Redis TTL semantics driven by a FakeClock."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self._data: dict[str, tuple[bytes, float | None]] = {}
        self.available = True
        self.writes: list[str] = []

    def _check(self) -> None:
        if not self.available:
            raise CacheUnavailableError("connection refused")

    def _live(self, key: str) -> tuple[bytes, float | None] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return entry

    def contains(self, key: str) -> bool:
        return self._live(key) is not None

    def raw(self, key: str) -> bytes | None:
        entry = self._live(key)
        return entry[0] if entry else None

    def put_raw(self, key: str, value: bytes, ttl: float | None = None) -> None:
        self._data[key] = (value, self._clock() + ttl if ttl is not None else None)

    async def get(self, key: str) -> bytes | None:
        self._check()
        return self.raw(key)

    async def set(self, key: str, value: bytes, ttl: int, only_if_absent: bool = False) -> bool:
        self._check()
        if only_if_absent and self._live(key) is not None:
            return False
        self._data[key] = (value, self._clock() + ttl)
        self.writes.append(key)
        return True

    async def delete(self, key: str) -> int:
        self._check()
        if self._live(key) is None:
            return 0
        del self._data[key]
        return 1

    async def ttl(self, key: str) -> int:
        self._check()
        entry = self._live(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return math.ceil(entry[1] - self._clock())

    async def expire(self, key: str, ttl: int) -> bool:
        self._check()
        entry = self._live(key)
        if entry is None:
            return False
        self._data[key] = (entry[0], self._clock() + ttl)
        return True

    async def health_check(self) -> bool:
        return self.available


class InMemoryRecordStore:
    """RecordStore over dictionaries, with a unique email on users."""

    UNIQUE = {"users": ("email",)}

    def __init__(self, clock: FakeClock | None = None) -> None:
        self._clock = clock or FakeClock()
        self._tables: dict[str, dict[int, Record]] = {"users": {}, "tasks": {}, "newsletters": {}}
        self._next_id: dict[str, int] = {name: 1 for name in self._tables}
        self.available = True
        self.find_all_calls: dict[str, int] = {name: 0 for name in self._tables}

    def _table(self, collection: str) -> dict[int, Record]:
        if not self.available:
            raise RecordStoreError("database unreachable")
        try:
            return self._tables[collection]
        except KeyError:
            raise UnknownCollectionError(collection) from None

    def _timestamp(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat()

    def _check_unique(self, collection: str, values: Record, exclude: int | None = None) -> None:
        for field in self.UNIQUE.get(collection, ()):
            if field not in values:
                continue
            for key, row in self._tables[collection].items():
                if key != exclude and row.get(field) == values[field]:
                    raise DuplicateRecordError(f"{collection}.{field} already exists")

    async def find_all(self, collection: str) -> list[Record]:
        table = self._table(collection)
        self.find_all_calls[collection] += 1
        return [copy.deepcopy(table[key]) for key in sorted(table)]

    async def find_by_key(self, collection: str, key: int) -> Record | None:
        row = self._table(collection).get(key)
        return copy.deepcopy(row) if row is not None else None

    async def find_one(self, collection: str, **fields: Any) -> Record | None:
        for key in sorted(self._table(collection)):
            row = self._tables[collection][key]
            if all(row.get(name) == value for name, value in fields.items()):
                return copy.deepcopy(row)
        return None

    async def create(self, collection: str, values: Record) -> Record:
        table = self._table(collection)
        self._check_unique(collection, values)
        key = self._next_id[collection]
        self._next_id[collection] += 1
        now = self._timestamp()
        table[key] = {"id": key, **copy.deepcopy(values), "created_at": now, "updated_at": now}
        return copy.deepcopy(table[key])

    async def update(self, collection: str, key: int, values: Record) -> Record | None:
        table = self._table(collection)
        if key not in table:
            return None
        self._check_unique(collection, values, exclude=key)
        table[key].update(copy.deepcopy(values), updated_at=self._timestamp())
        return copy.deepcopy(table[key])

    async def delete(self, collection: str, key: int) -> bool:
        return self._table(collection).pop(key, None) is not None

    async def health_check(self) -> bool:
        return self.available
