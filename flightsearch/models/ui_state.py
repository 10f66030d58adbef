"""
Search screen state model for the flight search application.

SearchUiState is an immutable snapshot. The search controller never
mutates it in place; every transition builds a new instance with
``model_copy(update=...)`` and swaps it into the state holder.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict

from .airport import AirportModel
from .enums import DisplayMode
from .favorite import FavoriteRouteModel
from .route import RouteCardModel


class SearchUiState(BaseModel):
    """
    Snapshot of everything the search screen shows.

    The display mode is derived from ``search_query``, ``selected_airport``
    and ``favorites`` rather than stored, so no snapshot can hold a mode
    that disagrees with its data.
    """
    model_config = ConfigDict(frozen=True)

    search_query: str = Field(default="", description="Text currently in the search box")
    suggestions: Tuple[AirportModel, ...] = Field(
        default=(), description="Autocomplete matches for search_query"
    )
    selected_airport: Optional[AirportModel] = Field(None, description="Chosen departure airport")
    destinations: Tuple[AirportModel, ...] = Field(
        default=(), description="Destinations for selected_airport"
    )
    favorites: Tuple[FavoriteRouteModel, ...] = Field(
        default=(), description="Live mirror of the favorite store"
    )
    all_airports: Dict[str, AirportModel] = Field(
        default_factory=dict, description="Live mirror of the airport store keyed by IATA code"
    )

    @property
    def showing_favorites(self) -> bool:
        """True when the query is blank and no airport is selected."""
        return not self.search_query.strip() and self.selected_airport is None

    @property
    def display_mode(self) -> DisplayMode:
        if self.selected_airport is not None:
            return DisplayMode.SELECTED
        if self.showing_favorites:
            return DisplayMode.FAVORITES if self.favorites else DisplayMode.IDLE
        return DisplayMode.SUGGESTING

    def is_favorite_route(self, departure_code: str, destination_code: str) -> bool:
        return any(f.matches(departure_code, destination_code) for f in self.favorites)

    def airport_name(self, code: str) -> str:
        airport = self.all_airports.get(code)
        return airport.name if airport else ""

    def favorite_cards(self) -> List[RouteCardModel]:
        """Favorites with names resolved from ``all_airports``."""
        return [
            RouteCardModel(
                departure_code=f.departure_code,
                departure_name=self.airport_name(f.departure_code),
                destination_code=f.destination_code,
                destination_name=self.airport_name(f.destination_code),
                is_favorite=True,
            )
            for f in self.favorites
        ]

    def destination_cards(self) -> List[RouteCardModel]:
        """Routes from the selected airport, flagged against the favorites snapshot."""
        departure = self.selected_airport
        if departure is None:
            return []
        return [
            RouteCardModel(
                departure_code=departure.iata_code,
                departure_name=departure.name,
                destination_code=dest.iata_code,
                destination_name=dest.name,
                is_favorite=self.is_favorite_route(departure.iata_code, dest.iata_code),
            )
            for dest in self.destinations
        ]
