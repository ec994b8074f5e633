"""
In-process snapshot cache for the full, ordered post list.

Holds at most one snapshot: the result of the last successful
"all posts ordered by title, author" query. There is no expiry and no size
bound; every write path must call `invalidate()`.

Concurrency (single asyncio event loop):
- readers never take the lock; the snapshot reference is swapped in one
  assignment, so `get()` sees either a whole snapshot or None
- `refresh()` / `invalidate()` serialize on an asyncio.Lock held only for
  the swap
- every `invalidate()` bumps `generation`; a `refresh()` tagged with an
  older generation is dropped, so a read that raced a write cannot
  re-populate stale rows
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from .schemas import Post

logger = logging.getLogger(__name__)


class SnapshotCache:
    def __init__(self) -> None:
        self._snapshot: tuple[Post, ...] | None = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_populated(self) -> bool:
        return self._snapshot is not None

    async def get(self) -> list[Post] | None:
        snapshot = self._snapshot
        if snapshot is None:
            return None
        # Posts are frozen, so a new list is enough for callers to own it.
        return list(snapshot)

    async def refresh(self, snapshot: Iterable[Post], *, generation: int | None = None) -> None:
        """
        Replace the cached snapshot.

        A no-op when `generation` is given and an invalidation happened since
        it was read.
        """
        frozen = tuple(snapshot)
        async with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(
                    "posts_cache_refresh_skipped stale_generation=%s current=%s",
                    generation,
                    self._generation,
                )
                return
            self._snapshot = frozen
        logger.debug("posts_cache_refreshed rows=%s", len(frozen))

    async def invalidate(self) -> None:
        async with self._lock:
            self._snapshot = None
            self._generation += 1
        logger.debug("posts_cache_invalidated generation=%s", self._generation)
