"""Cooldown rate limiter outcomes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Ready:
    """The action may proceed once; the cooldown is now armed."""


@dataclass(frozen=True)
class Blocked:
    """The cooldown is active.

    Attributes:
        remaining_seconds: Seconds until the action may be retried (always > 0)
    """

    remaining_seconds: int


CooldownDecision = Ready | Blocked
