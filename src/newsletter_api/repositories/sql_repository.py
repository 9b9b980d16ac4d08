"""SQLAlchemy implementation of RecordStore."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import inspect, select

from newsletter_api.db import DatabaseSessionManager
from newsletter_api.models import COLLECTIONS, Base
from newsletter_api.protocols import Record, UnknownCollectionError


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_record(instance: Base) -> Record:
    """Convert an ORM instance to a plain record with JSON-native values."""
    mapper = inspect(type(instance))
    return {attr.key: _jsonable(getattr(instance, attr.key)) for attr in mapper.column_attrs}


class SqlRecordStore:
    """Persistent store backed by SQLAlchemy's async ORM.

    This class satisfies the RecordStore protocol through structural
    typing. Collections are resolved through ``models.COLLECTIONS``.
    """

    def __init__(self, db: DatabaseSessionManager, collections: dict[str, type[Base]] | None = None) -> None:
        """Initialize the record store.

        Args:
            db: Session manager shared for the process lifetime.
            collections: Collection name to model mapping. Defaults to all models.
        """
        self._db = db
        self._collections = collections or COLLECTIONS

    def _model(self, collection: str) -> type[Base]:
        try:
            return self._collections[collection]
        except KeyError:
            raise UnknownCollectionError(f"Unknown collection: {collection}") from None

    def _columns(self, model: type[Base]) -> set[str]:
        return {attr.key for attr in inspect(model).column_attrs}

    async def find_all(self, collection: str) -> list[Record]:
        model = self._model(collection)
        async with self._db.session() as session:
            result = await session.execute(select(model).order_by(model.id))
            return [to_record(row) for row in result.scalars()]

    async def find_by_key(self, collection: str, key: int) -> Record | None:
        model = self._model(collection)
        async with self._db.session() as session:
            instance = await session.get(model, key)
            return to_record(instance) if instance is not None else None

    async def find_one(self, collection: str, **fields: Any) -> Record | None:
        model = self._model(collection)
        async with self._db.session() as session:
            result = await session.execute(select(model).filter_by(**fields).limit(1))
            instance = result.scalars().first()
            return to_record(instance) if instance is not None else None

    async def create(self, collection: str, values: Record) -> Record:
        model = self._model(collection)
        columns = self._columns(model)
        unknown = set(values) - columns
        if unknown:
            raise ValueError(f"Unknown fields for {collection}: {sorted(unknown)}")

        async with self._db.session() as session:
            instance = model(**values)
            session.add(instance)
            await session.commit()
            await session.refresh(instance)
            return to_record(instance)

    async def update(self, collection: str, key: int, values: Record) -> Record | None:
        model = self._model(collection)
        columns = self._columns(model)
        async with self._db.session() as session:
            instance = await session.get(model, key)
            if instance is None:
                return None
            for field, value in values.items():
                if field not in columns or field == "id":
                    raise ValueError(f"Field {field!r} cannot be updated on {collection}")
                setattr(instance, field, value)
            await session.commit()
            await session.refresh(instance)
            return to_record(instance)

    async def delete(self, collection: str, key: int) -> bool:
        model = self._model(collection)
        async with self._db.session() as session:
            instance = await session.get(model, key)
            if instance is None:
                return False
            await session.delete(instance)
            await session.commit()
            return True

    async def health_check(self) -> bool:
        return await self._db.health_check()
