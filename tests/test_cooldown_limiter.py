"""Tests for the cooldown rate limiter."""

import asyncio

import pytest

from newsletter_api.entities import Blocked, Ready
from newsletter_api.protocols import CacheUnavailableError
from newsletter_api.services import CooldownLimiter, cooldown_key

KEY = "resend:a@b.com"
WINDOW = 60


@pytest.fixture
def limiter(cache_store):
    return CooldownLimiter(cache_store)


def test_cooldown_key():
    assert cooldown_key("resend", "a@b.com") == KEY


@pytest.mark.asyncio
async def test_first_call_is_ready_and_arms(limiter, cache_store):
    assert await limiter.check_and_arm(KEY, WINDOW) == Ready()
    assert await cache_store.ttl(KEY) == WINDOW


@pytest.mark.asyncio
async def test_second_call_within_window_is_blocked(limiter, clock):
    await limiter.check_and_arm(KEY, WINDOW)

    for elapsed in (0, 1, 30, 59):
        clock.now = 1_700_000_000.0 + elapsed
        decision = await limiter.check_and_arm(KEY, WINDOW)
        assert isinstance(decision, Blocked)
        assert 0 < decision.remaining_seconds <= WINDOW
        assert decision.remaining_seconds == WINDOW - elapsed


@pytest.mark.asyncio
async def test_ready_again_after_window(limiter, clock):
    await limiter.check_and_arm(KEY, WINDOW)
    clock.advance(WINDOW)

    assert await limiter.check_and_arm(KEY, WINDOW) == Ready()
    assert isinstance(await limiter.check_and_arm(KEY, WINDOW), Blocked)


@pytest.mark.asyncio
async def test_keys_are_independent(limiter):
    assert await limiter.check_and_arm(KEY, WINDOW) == Ready()
    assert await limiter.check_and_arm("resend:other@b.com", WINDOW) == Ready()


@pytest.mark.asyncio
async def test_concurrent_callers_get_one_ready(limiter):
    decisions = await asyncio.gather(*(limiter.check_and_arm(KEY, WINDOW) for _ in range(20)))

    assert sum(isinstance(d, Ready) for d in decisions) == 1
    assert all(isinstance(d, (Ready, Blocked)) for d in decisions)


@pytest.mark.asyncio
async def test_key_without_expiry_gets_one(limiter, cache_store):
    cache_store.put_raw(KEY, b"1")

    decision = await limiter.check_and_arm(KEY, WINDOW)

    assert decision == Blocked(remaining_seconds=WINDOW)
    assert await cache_store.ttl(KEY) == WINDOW


@pytest.mark.asyncio
async def test_cache_unavailable_propagates(limiter, cache_store):
    cache_store.available = False

    with pytest.raises(CacheUnavailableError):
        await limiter.check_and_arm(KEY, WINDOW)


@pytest.mark.asyncio
async def test_rejects_non_positive_window(limiter):
    with pytest.raises(ValueError):
        await limiter.check_and_arm(KEY, 0)
