"""
Main entry point for the flight search application.

Wires the database, stores and search controller together and runs a
line-based console session on top of them.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass

from flightsearch.database import (
    DatabaseConfig,
    InvalidationTracker,
    import_airports_csv,
    initialize_database,
    seed_sample_airports,
)
from flightsearch.models import DisplayMode, SearchUiState
from flightsearch.services import SearchController
from flightsearch.stores import (
    AirportStore,
    FavoriteStore,
    FlightRepository,
    create_preference_store,
)
from flightsearch.utils.config import FlightSearchConfig, get_config

logger = logging.getLogger(__name__)

HELP_TEXT = """Type to search airports. Commands:
  /select CODE     pick a departure airport
  /fav DEP DST     toggle a favorite route
  /clear           clear the search
  /quit            exit"""


@dataclass
class Application:
    """Everything built at startup, owned by the running session."""
    config: FlightSearchConfig
    db_config: DatabaseConfig
    repository: FlightRepository
    controller: SearchController

    async def close(self) -> None:
        await self.controller.close()
        await self.controller.preferences.close()
        self.db_config.close()


def configure_logging(config: FlightSearchConfig) -> None:
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def build_application(config: FlightSearchConfig) -> Application:
    """Create the database, stores and controller described by ``config``."""
    db_config = initialize_database(config.database_url, echo=config.database_echo)

    if config.airports_csv:
        import_airports_csv(db_config, config.airports_csv)
    elif config.seed_sample_data:
        seed_sample_airports(db_config)

    tracker = InvalidationTracker()
    repository = FlightRepository(
        AirportStore(db_config, tracker),
        FavoriteStore(db_config, tracker),
    )
    preferences = create_preference_store(
        config.preference_backend, db_config, config.valkey_config()
    )
    controller = SearchController(repository, preferences)
    return Application(config, db_config, repository, controller)


def render(state: SearchUiState) -> str:
    """Plain-text view of the current display mode."""
    mode = state.display_mode
    lines = [f"[{mode.value}] query={state.search_query!r}"]

    if mode is DisplayMode.SELECTED:
        departure = state.selected_airport
        lines.append(f"Flights from {departure.iata_code} {departure.name}:")
        for card in state.destination_cards():
            star = "*" if card.is_favorite else " "
            lines.append(f" {star} {card.destination_code}  {card.destination_name}")
    elif mode is DisplayMode.FAVORITES:
        lines.append("Favorite routes:")
        for card in state.favorite_cards():
            lines.append(
                f"  * {card.departure_code} {card.departure_name} -> "
                f"{card.destination_code} {card.destination_name}"
            )
    elif mode is DisplayMode.SUGGESTING:
        for airport in state.suggestions:
            lines.append(f"    {airport.iata_code}  {airport.name}")
        if not state.suggestions:
            lines.append("  (no matching airports)")
    else:
        lines.append("Enter departure airport or city")

    return "\n".join(lines)


async def handle_line(app: Application, line: str) -> bool:
    """
    Forward one line of console input to the controller.

    Returns:
        bool: False when the session should end
    """
    controller = app.controller
    command, _, rest = line.strip().partition(" ")

    if command == "/quit":
        return False
    if command == "/help":
        print(HELP_TEXT)
    elif command == "/clear":
        controller.clear_search()
    elif command == "/select":
        airport = await app.repository.get_airport_by_code(rest.strip().upper())
        if airport is None:
            print(f"Unknown airport {rest.strip()!r}")
        else:
            controller.select_airport(airport)
    elif command == "/fav":
        codes = rest.upper().split()
        if len(codes) != 2:
            print("Usage: /fav DEP DST")
        else:
            await controller.toggle_favorite(codes[0], codes[1])
    else:
        controller.on_query_changed(line.rstrip("\n"))
    return True


async def run_console(app: Application) -> None:
    restore = app.controller.start()
    if restore is not None:
        await restore
    print(HELP_TEXT)

    while True:
        # Let pending lookups land before drawing
        await asyncio.sleep(0.05)
        print(render(app.controller.ui_state))
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            break
        if not await handle_line(app, line):
            break


async def run(config: FlightSearchConfig) -> None:
    app = build_application(config)
    try:
        await run_console(app)
    finally:
        await app.close()


def main() -> int:
    """Main entry point for the flight search console."""
    try:
        config = get_config()
    except ValueError as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(config)

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Flight search failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
