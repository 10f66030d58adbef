"""
Search controller for the flight search screen.

This module turns user intents (typing, picking an airport, clearing,
toggling favorites) into SearchUiState transitions, coordinating the
cancelable background lookups that feed the state.

Every public operation is a plain method that must be called on the event
loop owning the controller. Background work runs as asyncio tasks on that
same loop, so state replacements never run concurrently with each other.
"""

import asyncio
import logging
from typing import Any, Coroutine, List, Optional, Sequence, Set

from ..models.airport import AirportModel
from ..models.enums import DisplayMode
from ..models.ui_state import SearchUiState
from ..stores.preference_store import PreferenceStore
from ..stores.repository import FlightRepository
from .state import UiStateHolder

logger = logging.getLogger(__name__)


class ControllerClosedError(RuntimeError):
    """Raised when an operation is invoked after ``close()``."""
    pass


class SearchController:
    """
    Owner of the search state and the lookups that feed it.

    Features:
    - Live mirrors of all airports and all favorites for the controller lifetime
    - One-shot restore of the last saved query on start
    - At most one current suggestion lookup and one current destination lookup
    - Generation tokens so a superseded lookup can never write state
    - Fire-and-forget, in-order persistence of the query text
    """

    def __init__(
        self,
        repository: FlightRepository,
        preferences: PreferenceStore,
        state: Optional[UiStateHolder] = None,
    ):
        """
        Initialize the controller.

        Args:
            repository: Airport and favorite data access
            preferences: Storage for the last search query
            state: Optional pre-built state holder
        """
        self.repository = repository
        self.preferences = preferences
        self.state = state or UiStateHolder()

        self._search_task: Optional[asyncio.Task] = None
        self._destination_task: Optional[asyncio.Task] = None
        self._search_generation = 0
        self._destination_generation = 0

        self._mirror_tasks: List[asyncio.Task] = []
        self._restore_task: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()

        # Created lazily so the controller can be built outside a running loop
        self._persist_lock: Optional[asyncio.Lock] = None
        self._toggle_lock: Optional[asyncio.Lock] = None

        self._started = False
        self._closed = False

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def ui_state(self) -> SearchUiState:
        return self.state.value

    @property
    def display_mode(self) -> DisplayMode:
        return self.state.value.display_mode

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Optional[asyncio.Task]:
        """
        Start the airport and favorite mirrors and restore the saved query.

        Returns:
            The restore task, or None if the controller was already started
        """
        self._check_open()
        if self._started:
            logger.warning("SearchController.start() called twice, ignoring")
            return None
        self._started = True

        self._mirror_tasks = [
            self._spawn(self._mirror_airports(), "mirror-airports"),
            self._spawn(self._mirror_favorites(), "mirror-favorites"),
        ]
        self._restore_task = self._spawn(self._restore_saved_query(), "restore-query")
        logger.info("Search controller started")
        return self._restore_task

    async def close(self) -> None:
        """Cancel every background task and wait for pending writes."""
        if self._closed:
            return
        self._closed = True

        tasks = [
            t for t in (
                *self._mirror_tasks,
                self._restore_task,
                self._search_task,
                self._destination_task,
            )
            if t is not None
        ]
        # Lookups that outlive their cancellation must still not write
        self._search_generation += 1
        self._destination_generation += 1
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

        self._search_task = None
        self._destination_task = None
        logger.info("Search controller closed")

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def on_query_changed(self, query: str) -> None:
        """Replace the query text, dropping any selection and stale results."""
        self._check_open()
        self.state.update(lambda s: s.model_copy(update={
            "search_query": query,
            "selected_airport": None,
            "destinations": (),
            "suggestions": (),
        }))
        self._persist_query(query)
        self._cancel_destinations()

        if not query.strip():
            self._cancel_suggestions()
        else:
            self._load_suggestions(query)

    def select_airport(self, airport: AirportModel) -> None:
        """Make ``airport`` the departure and stream its destinations."""
        self._check_open()
        self._cancel_suggestions()
        self.state.update(lambda s: s.model_copy(update={
            "selected_airport": airport,
            "search_query": airport.iata_code,
            "suggestions": (),
            "destinations": (),
        }))
        self._persist_query(airport.iata_code)
        self._load_destinations(airport)

    def clear_search(self) -> None:
        """Reset the query, selection and both result lists."""
        self._check_open()
        self._cancel_suggestions()
        self._cancel_destinations()
        self.state.update(lambda s: s.model_copy(update={
            "search_query": "",
            "selected_airport": None,
            "suggestions": (),
            "destinations": (),
        }))
        self._persist_query("")

    def toggle_favorite(self, departure_code: str, destination_code: str) -> asyncio.Task:
        """
        Save the route if it is not a favorite yet, remove it otherwise.

        Toggles issued through this controller run one at a time in call
        order, so each one checks the result of the previous one.

        Returns:
            Task resolving to True if the route is now a favorite, False if it
            was removed, None if the store failed
        """
        self._check_open()
        return self._spawn_background(
            self._toggle(departure_code, destination_code),
            f"toggle-favorite:{departure_code}->{destination_code}",
        )

    def is_favorite_route(self, departure_code: str, destination_code: str) -> bool:
        """Check the current favorites snapshot; never touches the store."""
        return self.state.value.is_favorite_route(departure_code, destination_code)

    # ------------------------------------------------------------------
    # Suggestion and destination lookups
    # ------------------------------------------------------------------

    def _load_suggestions(self, query: str) -> None:
        self._cancel_suggestions()
        generation = self._search_generation
        self._search_task = self._spawn(
            self._collect_suggestions(query, generation), f"suggestions:{query}"
        )
        logger.debug(f"Suggestion lookup #{generation} started for {query!r}")

    def _cancel_suggestions(self) -> None:
        self._search_generation += 1
        if self._search_task is not None:
            self._search_task.cancel()
            self._search_task = None

    async def _collect_suggestions(self, query: str, generation: int) -> None:
        try:
            async for airports in self.repository.search_airports(query):
                self._apply_suggestions(generation, airports)
        except Exception as e:
            logger.warning(f"Suggestion lookup for {query!r} failed: {e}")
            self._apply_suggestions(generation, ())

    def _apply_suggestions(self, generation: int, airports: Sequence[AirportModel]) -> None:
        if generation != self._search_generation:
            logger.debug(f"Discarding stale suggestions from lookup #{generation}")
            return
        result = tuple(airports)
        self.state.update(lambda s: s.model_copy(update={"suggestions": result}))

    def _load_destinations(self, airport: AirportModel) -> None:
        self._cancel_destinations()
        generation = self._destination_generation
        self._destination_task = self._spawn(
            self._collect_destinations(airport, generation), f"destinations:{airport.iata_code}"
        )
        logger.debug(f"Destination lookup #{generation} started for {airport.iata_code}")

    def _cancel_destinations(self) -> None:
        self._destination_generation += 1
        if self._destination_task is not None:
            self._destination_task.cancel()
            self._destination_task = None

    async def _collect_destinations(self, airport: AirportModel, generation: int) -> None:
        try:
            async for airports in self.repository.get_destinations_except(airport.iata_code):
                self._apply_destinations(generation, airports)
        except Exception as e:
            logger.warning(f"Destination lookup for {airport.iata_code} failed: {e}")
            self._apply_destinations(generation, ())

    def _apply_destinations(self, generation: int, airports: Sequence[AirportModel]) -> None:
        if generation != self._destination_generation:
            logger.debug(f"Discarding stale destinations from lookup #{generation}")
            return
        result = tuple(airports)
        self.state.update(lambda s: s.model_copy(update={"destinations": result}))

    # ------------------------------------------------------------------
    # Long-lived mirrors and restore
    # ------------------------------------------------------------------

    async def _mirror_airports(self) -> None:
        try:
            async for airports in self.repository.get_all_airports():
                lookup = {a.iata_code: a for a in airports}
                self.state.update(lambda s: s.model_copy(update={"all_airports": lookup}))
        except Exception as e:
            logger.warning(f"Airport mirror stopped: {e}")

    async def _mirror_favorites(self) -> None:
        try:
            async for favorites in self.repository.get_all_favorites():
                result = tuple(favorites)
                self.state.update(lambda s: s.model_copy(update={"favorites": result}))
        except Exception as e:
            logger.warning(f"Favorite mirror stopped: {e}")

    async def _restore_saved_query(self) -> None:
        try:
            saved = await self.preferences.get_saved_query()
        except Exception as e:
            logger.warning(f"Could not read saved search query: {e}")
            return

        if not saved:
            logger.debug("No saved search query to restore")
            return

        try:
            airport = await self.repository.get_airport_by_code(saved)
        except Exception as e:
            logger.warning(f"Lookup of saved code {saved!r} failed: {e}")
            airport = None

        if airport is not None:
            logger.info(f"Restored selected airport {airport.iata_code}")
            self.select_airport(airport)
            return

        # Same reset as typing the text, minus the write back to the store
        logger.info(f"Restored search query {saved!r}")
        self._cancel_destinations()
        self.state.update(lambda s: s.model_copy(update={
            "search_query": saved,
            "selected_airport": None,
            "destinations": (),
            "suggestions": (),
        }))
        if saved.strip():
            self._load_suggestions(saved)
        else:
            self._cancel_suggestions()

    # ------------------------------------------------------------------
    # Background writes
    # ------------------------------------------------------------------

    def _persist_query(self, value: str) -> asyncio.Task:
        return self._spawn_background(self._save_query(value), "save-query")

    async def _save_query(self, value: str) -> None:
        if self._persist_lock is None:
            self._persist_lock = asyncio.Lock()
        async with self._persist_lock:
            try:
                await self.preferences.save_query(value)
            except Exception as e:
                logger.warning(f"Failed to save search query {value!r}: {e}")

    async def _toggle(self, departure_code: str, destination_code: str) -> Optional[bool]:
        if self._toggle_lock is None:
            self._toggle_lock = asyncio.Lock()
        async with self._toggle_lock:
            try:
                if await self.repository.is_favorite(departure_code, destination_code):
                    await self.repository.remove_favorite(departure_code, destination_code)
                    return False
                await self.repository.add_favorite(departure_code, destination_code)
                return True
            except Exception as e:
                logger.warning(f"Toggling favorite {departure_code}->{destination_code} failed: {e}")
                return None

    # ------------------------------------------------------------------
    # Task helpers
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        return asyncio.get_running_loop().create_task(coro, name=name)

    def _spawn_background(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        task = self._spawn(coro, name)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _check_open(self) -> None:
        if self._closed:
            raise ControllerClosedError("SearchController is closed")
