"""
Table invalidation tracking and live queries.

Stores report every committed write to an ``InvalidationTracker``. A
``LiveQuery`` wraps a query function and the tables it reads; iterating it
yields a fresh snapshot on subscription and again after every write to one
of those tables, until the consuming task is cancelled.
"""

import asyncio
import logging
from collections import defaultdict
from typing import AsyncIterator, Awaitable, Callable, Dict, Generic, Iterable, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidationTracker:
    """
    Per-table write counters with async change notification.

    Versions only ever grow, so a subscriber that remembers the version it
    last queried at can never miss a write, even one that lands while its
    query is running.
    """

    def __init__(self):
        self._versions: Dict[str, int] = defaultdict(int)
        # Created on first use so it belongs to the loop that awaits it
        self._condition: Optional[asyncio.Condition] = None

    @property
    def condition(self) -> asyncio.Condition:
        if self._condition is None:
            self._condition = asyncio.Condition()
        return self._condition

    def version(self, tables: Iterable[str]) -> int:
        """Combined version of the given tables."""
        return sum(self._versions[t] for t in tables)

    async def notify(self, *tables: str) -> None:
        """Record a write to ``tables`` and wake every waiting subscriber."""
        async with self.condition:
            for table in tables:
                self._versions[table] += 1
            self.condition.notify_all()
        logger.debug(f"Invalidated tables: {', '.join(tables)}")

    async def wait_for_change(self, tables: Tuple[str, ...], seen: int) -> int:
        """
        Block until the combined version of ``tables`` moves past ``seen``.

        Returns:
            int: The new combined version
        """
        async with self.condition:
            await self.condition.wait_for(lambda: self.version(tables) != seen)
            return self.version(tables)


class LiveQuery(Generic[T]):
    """
    Restartable stream of query snapshots.

    Each ``async for`` over the same LiveQuery is an independent
    subscription with its own position.
    """

    def __init__(
        self,
        tracker: InvalidationTracker,
        tables: Iterable[str],
        fetch: Callable[[], Awaitable[T]],
        description: str = "",
    ):
        self.tracker = tracker
        self.tables = tuple(tables)
        self._fetch = fetch
        self.description = description or ",".join(self.tables)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._snapshots()

    async def _snapshots(self) -> AsyncIterator[T]:
        seen = self.tracker.version(self.tables)
        while True:
            yield await self._fetch()
            seen = await self.tracker.wait_for_change(self.tables, seen)
            logger.debug(f"Re-running live query {self.description}")

    async def first(self) -> T:
        """One-shot read of the current snapshot."""
        return await self._fetch()
