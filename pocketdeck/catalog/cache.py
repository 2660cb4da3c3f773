"""
In-memory catalog cache.

Holds one immutable snapshot of the catalog. A refresh replaces the whole
snapshot with a single assignment, so readers always see either the old
catalog or the new one, never a mix.
"""

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from pocketdeck.models.card import CatalogItem

DEFAULT_TTL = 60.0 * 60.0 * 24.0


class CacheState(str, Enum):
    """Freshness of the cached catalog."""

    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class CacheSnapshot:
    """
    One complete catalog as of a successful refresh.

    Attributes:
        items: Cards in fetch order
        fetched_at: Epoch seconds when the refresh completed
    """

    items: tuple[CatalogItem, ...]
    fetched_at: float


class CatalogCache:
    """Single-snapshot cache with a freshness window."""

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.time) -> None:
        self.ttl = ttl
        self._clock = clock
        self._snapshot: CacheSnapshot | None = None
        self.degraded = False

    @property
    def snapshot(self) -> CacheSnapshot | None:
        return self._snapshot

    def state(self) -> CacheState:
        snapshot = self._snapshot
        if snapshot is None:
            return CacheState.EMPTY
        if self._clock() - snapshot.fetched_at < self.ttl:
            return CacheState.FRESH
        return CacheState.STALE

    def is_fresh(self) -> bool:
        return self.state() is CacheState.FRESH

    def store(self, items: Iterable[CatalogItem]) -> CacheSnapshot:
        """Replace the cached catalog. Clears degraded mode."""
        snapshot = CacheSnapshot(items=tuple(items), fetched_at=self._clock())
        self._snapshot = snapshot
        self.degraded = False
        return snapshot

    def invalidate(self) -> None:
        """Drop the snapshot so the next read refetches regardless of age."""
        self._snapshot = None
        self.degraded = False
