"""Tests for the SQLAlchemy record store on SQLite."""

import pytest

from newsletter_api.db import DatabaseSessionManager
from newsletter_api.protocols import DuplicateRecordError, RecordStoreError, UnknownCollectionError
from newsletter_api.repositories import SqlRecordStore


@pytest.fixture
async def store(tmp_path):
    db = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_tables()
    yield SqlRecordStore(db)
    await db.close()


@pytest.mark.asyncio
async def test_create_and_find(store):
    created = await store.create("tasks", {"description": "x", "completed": False})

    assert created["id"] == 1
    assert created["description"] == "x"
    assert isinstance(created["created_at"], str)
    assert await store.find_by_key("tasks", created["id"]) == created
    assert await store.find_all("tasks") == [created]


@pytest.mark.asyncio
async def test_find_all_orders_by_id(store):
    for description in ("a", "b", "c"):
        await store.create("tasks", {"description": description, "completed": False})

    assert [t["description"] for t in await store.find_all("tasks")] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_find_one(store):
    await store.create("users", {"name": "Ana", "email": "ana@example.com", "password": "h"})

    found = await store.find_one("users", email="ana@example.com")

    assert found["name"] == "Ana"
    assert found["email_verified"] is False
    assert await store.find_one("users", email="nobody@example.com") is None


@pytest.mark.asyncio
async def test_unique_email(store):
    values = {"name": "Ana", "email": "ana@example.com", "password": "h"}
    await store.create("users", values)

    with pytest.raises(DuplicateRecordError):
        await store.create("users", values)


@pytest.mark.asyncio
async def test_update(store):
    created = await store.create("newsletters", {"title": "T", "description": "D", "author_id": 1})

    updated = await store.update("newsletters", created["id"], {"title": "T2", "image_url": "http://img"})

    assert updated["title"] == "T2"
    assert updated["image_url"] == "http://img"
    assert updated["author_id"] == 1
    assert await store.update("newsletters", 99, {"title": "x"}) is None


@pytest.mark.asyncio
async def test_update_rejects_unknown_and_primary_key_fields(store):
    created = await store.create("tasks", {"description": "x", "completed": False})

    with pytest.raises(ValueError):
        await store.update("tasks", created["id"], {"id": 5})
    with pytest.raises(ValueError):
        await store.update("tasks", created["id"], {"owner": 5})


@pytest.mark.asyncio
async def test_delete(store):
    created = await store.create("tasks", {"description": "x", "completed": False})

    assert await store.delete("tasks", created["id"]) is True
    assert await store.delete("tasks", created["id"]) is False
    assert await store.find_all("tasks") == []


@pytest.mark.asyncio
async def test_unknown_collection(store):
    with pytest.raises(UnknownCollectionError):
        await store.find_all("comments")


@pytest.mark.asyncio
async def test_missing_not_null_column_is_store_error(store):
    with pytest.raises(RecordStoreError):
        await store.create("newsletters", {"title": "T"})


@pytest.mark.asyncio
async def test_health_check(store):
    assert await store.health_check() is True


@pytest.mark.asyncio
async def test_out_of_range_key_is_store_error(store):
    with pytest.raises(RecordStoreError):
        await store.find_by_key("tasks", 2**70)
