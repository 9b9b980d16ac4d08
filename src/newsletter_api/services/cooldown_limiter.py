"""Cooldown rate limiter.

A cooldown key's presence in the cache store means "this action fired within
the last window". Arming is a single ``SET key 1 EX window NX``, so two
concurrent callers can never both be told ``Ready`` for the same window.
"""

from newsletter_api.entities import Blocked, CooldownDecision, Ready
from newsletter_api.logging import get_logger
from newsletter_api.protocols import CacheStore

logger = get_logger(__name__)

# TTL reply for a key that exists without an expiry
_NO_EXPIRY = -1

_MAX_ATTEMPTS = 3


def cooldown_key(action: str, identifier: str) -> str:
    """Cooldown key for an action performed for an identifier."""
    return f"{action}:{identifier}"


class CooldownLimiter:
    """At-most-one-action-per-window gate over a CacheStore.

    Cache store failures (``CacheUnavailableError``) propagate: an unreachable
    store blocks the action instead of letting it through unthrottled.
    """

    def __init__(self, cache_store: CacheStore) -> None:
        self._cache = cache_store

    async def check_and_arm(self, key: str, window_seconds: int) -> CooldownDecision:
        """Arm the cooldown for ``key`` unless it is already active.

        Args:
            key: Cooldown key, e.g. ``"resend:a@b.com"``
            window_seconds: Length of the cooldown window

        Returns:
            Ready if the caller may proceed (the window is now armed),
            Blocked with the remaining seconds otherwise
        """
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        for _ in range(_MAX_ATTEMPTS):
            if await self._cache.set(key, b"1", window_seconds, only_if_absent=True):
                logger.info("cooldown_armed", key=key, window=window_seconds)
                return Ready()

            remaining = await self._cache.ttl(key)
            if remaining > 0:
                logger.info("cooldown_blocked", key=key, remaining=remaining)
                return Blocked(remaining_seconds=remaining)

            if remaining == _NO_EXPIRY:
                # A key without expiry would block forever
                await self._cache.expire(key, window_seconds)
                logger.warning("cooldown_key_without_expiry", key=key)
                return Blocked(remaining_seconds=window_seconds)

            # absent (-2) or 0: the window lapsed between SET NX and TTL, try again

        logger.warning("cooldown_contended", key=key)
        return Blocked(remaining_seconds=1)
