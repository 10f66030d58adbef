"""
Holder for the published search state.

The holder owns the single SearchUiState instance. Writers replace it through
``update``; readers take ``value`` from any thread, register a synchronous
listener, or iterate ``states()`` from a coroutine.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Callable, List, Optional, Set

from ..models.ui_state import SearchUiState

logger = logging.getLogger(__name__)

StateListener = Callable[[SearchUiState], None]


class UiStateHolder:
    """Atomically swapped SearchUiState with change notification."""

    def __init__(self, initial: Optional[SearchUiState] = None):
        self._value = initial if initial is not None else SearchUiState()
        self._lock = threading.Lock()
        self._listeners: List[StateListener] = []
        self._waiters: Set[asyncio.Event] = set()

    @property
    def value(self) -> SearchUiState:
        return self._value

    def update(self, transform: Callable[[SearchUiState], SearchUiState]) -> SearchUiState:
        """
        Replace the state with ``transform(current)``.

        The read of the current value and the swap happen under one lock, so
        concurrent writers never lose each other's changes. Listeners run
        after the lock is released and only when the value changed.

        Returns:
            SearchUiState: The state after the update
        """
        with self._lock:
            current = self._value
            new_state = transform(current)
            if new_state == current:
                return current
            self._value = new_state
            listeners = list(self._listeners)
            waiters = list(self._waiters)

        for event in waiters:
            event.set()
        for listener in listeners:
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener failed")
        return new_state

    def add_listener(self, listener: StateListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    async def states(self) -> AsyncIterator[SearchUiState]:
        """
        Yield the current state, then every later state.

        Updates that land while the consumer is busy are conflated: only
        the most recent one is yielded.
        """
        event = asyncio.Event()
        with self._lock:
            self._waiters.add(event)
        try:
            last = self._value
            yield last
            while True:
                await event.wait()
                event.clear()
                current = self._value
                if current is not last:
                    last = current
                    yield current
        finally:
            with self._lock:
                self._waiters.discard(event)

    async def wait_for(
        self,
        predicate: Callable[[SearchUiState], bool],
        timeout: Optional[float] = None,
    ) -> SearchUiState:
        """
        Wait until the state satisfies ``predicate``.

        Raises:
            asyncio.TimeoutError: If ``timeout`` elapses first
        """
        async def _wait() -> SearchUiState:
            stream = self.states()
            try:
                async for state in stream:
                    if predicate(state):
                        return state
            finally:
                await stream.aclose()
            raise RuntimeError("State stream ended")

        return await asyncio.wait_for(_wait(), timeout)
