"""Read-through result entity."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CacheOrigin(str, Enum):
    """Where a read-through result came from."""

    HIT = "hit"
    MISS = "miss"


@dataclass(frozen=True)
class CacheRead:
    """Records returned by a read-through together with their origin."""

    records: list[dict[str, Any]]
    origin: CacheOrigin
