"""Process-wide snapshot cache over a collection store.

One ``ContentCache`` owns the snapshot of one collection. The snapshot
is replaced wholesale on reload and never mutated in place.

Consistency window: ``get_by_slug`` falls back to a direct store read
when the slug is not in the snapshot, without adding the result to it.
Until the next reload, a newly added item can be found by slug while
``get_all`` (and everything ranked from it) still omits it.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from sitecontent.content.store import CollectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]

INFINITE_MAX_AGE = math.inf
DEFAULT_RUNTIME_MAX_AGE = 5 * 60.0


@dataclass(frozen=True)
class CacheSnapshot(Generic[T]):
    """An immutable copy of a collection and the clock time it was taken."""

    items: tuple[T, ...]
    populated_at: float

    def age(self, now: float) -> float:
        return now - self.populated_at


class ContentCache(Generic[T]):
    """Serve one collection from memory until its snapshot goes stale.

    Args:
        store: Collection store to load from.
        max_age: Seconds a snapshot stays fresh. ``INFINITE_MAX_AGE``
            keeps the first snapshot for the life of the process.
        clock: Seconds-returning clock, ``time.monotonic`` by default.
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        max_age: float = DEFAULT_RUNTIME_MAX_AGE,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_age <= 0:
            raise ValueError(f"max_age must be positive, got {max_age}")
        self._store = store
        self._max_age = max_age
        self._clock = clock
        self._snapshot: CacheSnapshot[T] | None = None

    @property
    def store(self) -> CollectionStore:
        return self._store

    @property
    def max_age(self) -> float:
        return self._max_age

    @property
    def snapshot(self) -> CacheSnapshot[T] | None:
        return self._snapshot

    def is_stale(self, now: float | None = None) -> bool:
        """True when there is no snapshot or it has reached ``max_age``."""
        if self._snapshot is None:
            return True
        now = self._clock() if now is None else now
        return self._snapshot.age(now) >= self._max_age

    async def get_all(self) -> tuple[T, ...]:
        """Return the cached items, reloading the collection if stale."""
        now = self._clock()
        snapshot = self._snapshot
        if snapshot is not None and snapshot.age(now) < self._max_age:
            logger.debug("Cache hit for %s", self._store.directory)
            return snapshot.items
        return await self.reload(now=now)

    async def get_by_slug(self, slug: str) -> T | None:
        """Find an item in the snapshot, else read it directly from the store."""
        for item in await self.get_all():
            if item.slug == slug:
                return item
        return await self._store.read_item(slug)

    async def reload(self, *, now: float | None = None) -> tuple[T, ...]:
        """Read the whole collection and replace the snapshot.

        The snapshot is stamped with the time the reload started.
        Concurrent reloads are not coalesced; the last to finish wins.
        """
        started = self._clock() if now is None else now
        items = await self._store.read_all()
        snapshot = CacheSnapshot(items=tuple(items), populated_at=started)
        self._snapshot = snapshot
        logger.debug("Cached %d items from %s", len(snapshot.items), self._store.directory)
        return snapshot.items

    def invalidate(self) -> None:
        """Drop the snapshot so the next read reloads the whole collection."""
        self._snapshot = None
