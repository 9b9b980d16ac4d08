"""Tests for the cached task and newsletter services."""

import pytest

from newsletter_api.entities import CacheOrigin, IdentityClaims, RequestContext
from newsletter_api.errors import ForbiddenError, NotFoundError
from newsletter_api.protocols import RecordStoreError
from newsletter_api.repositories import CacheAsideRepository
from newsletter_api.services import NewsletterService, TaskService


def context_for(subject_id: int) -> RequestContext:
    return RequestContext(
        claims=IdentityClaims(subject_id=subject_id, purpose="session", issued_at=0, expires_at=2**40)
    )


@pytest.fixture
def tasks(record_store, cache_store):
    return TaskService(record_store, CacheAsideRepository(cache_store), list_ttl=60)


@pytest.fixture
def newsletters(record_store, cache_store):
    return NewsletterService(record_store, CacheAsideRepository(cache_store), list_ttl=60)


@pytest.mark.asyncio
async def test_task_list_reads_through(tasks, record_store):
    first = await tasks.list()
    second = await tasks.list()

    assert first.origin is CacheOrigin.MISS
    assert second.origin is CacheOrigin.HIT
    assert record_store.find_all_calls["tasks"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("mutation", ["create", "update", "delete"])
async def test_task_mutations_invalidate_list(tasks, cache_store, mutation):
    task = await tasks.create("write tests")
    await tasks.list()
    assert cache_store.contains("tasks:list")

    if mutation == "create":
        await tasks.create("another")
    elif mutation == "update":
        await tasks.update(task["id"], {"completed": True})
    else:
        await tasks.delete(task["id"])

    assert not cache_store.contains("tasks:list")
    result = await tasks.list()
    assert result.origin is CacheOrigin.MISS


@pytest.mark.asyncio
async def test_task_create_sets_defaults(tasks):
    task = await tasks.create("x")

    assert task["description"] == "x"
    assert task["completed"] is False


@pytest.mark.asyncio
async def test_missing_task_raises_not_found_and_keeps_cache(tasks, cache_store):
    await tasks.list()

    with pytest.raises(NotFoundError):
        await tasks.update(99, {"completed": True})
    with pytest.raises(NotFoundError):
        await tasks.delete(99)
    with pytest.raises(NotFoundError):
        await tasks.get(99)

    assert cache_store.contains("tasks:list")


@pytest.mark.asyncio
async def test_failed_mutation_does_not_invalidate(tasks, record_store, cache_store):
    await tasks.list()
    record_store.available = False

    with pytest.raises(RecordStoreError):
        await tasks.create("x")

    assert cache_store.contains("tasks:list")


@pytest.mark.asyncio
async def test_newsletter_create_is_scoped_to_caller(newsletters):
    record = await newsletters.create(context_for(5), title="T", description="D")

    assert record["author_id"] == 5
    assert record["image_url"] is None


@pytest.mark.asyncio
async def test_owner_can_update_and_delete(newsletters, cache_store):
    owner = context_for(1)
    record = await newsletters.create(owner, title="T", description="D")

    updated = await newsletters.update(owner, record["id"], {"title": "New"})
    assert updated["title"] == "New"

    await newsletters.list()
    await newsletters.delete(owner, record["id"])
    assert not cache_store.contains("newsletters:list")
    assert (await newsletters.list()).records == []


@pytest.mark.asyncio
@pytest.mark.parametrize("cached", [True, False])
async def test_non_owner_is_forbidden_regardless_of_cache(newsletters, record_store, cache_store, cached):
    record = await newsletters.create(context_for(1), title="T", description="D")
    if cached:
        await newsletters.list()

    with pytest.raises(ForbiddenError):
        await newsletters.update(context_for(2), record["id"], {"title": "Hijacked"})
    with pytest.raises(ForbiddenError):
        await newsletters.delete(context_for(2), record["id"])

    stored = await record_store.find_by_key("newsletters", record["id"])
    assert stored["title"] == "T"
    assert cache_store.contains("newsletters:list") is cached


@pytest.mark.asyncio
async def test_ownership_is_read_from_store_not_cache(newsletters, cache_store):
    record = await newsletters.create(context_for(1), title="T", description="D")
    # a forged snapshot claiming subject 2 owns the record
    cache_store.put_raw(
        "newsletters:list",
        b'[{"id":1,"title":"T","description":"D","author_id":2}]',
        ttl=60,
    )

    with pytest.raises(ForbiddenError):
        await newsletters.update(context_for(2), record["id"], {"title": "x"})


@pytest.mark.asyncio
async def test_missing_newsletter_is_not_found(newsletters):
    with pytest.raises(NotFoundError):
        await newsletters.update(context_for(1), 42, {"title": "x"})
