"""
Flight repository combining the airport and favorite stores.

This is the data-access surface the search controller depends on.
"""

import logging
from typing import List, Optional

from ..database.live import LiveQuery
from ..models.airport import AirportModel
from ..models.favorite import FavoriteRouteModel
from .airport_store import AirportStore
from .favorite_store import FavoriteStore

logger = logging.getLogger(__name__)


class FlightRepository:
    """Airport lookups and favorite management behind one object."""

    def __init__(self, airport_store: AirportStore, favorite_store: FavoriteStore):
        self.airports = airport_store
        self.favorites = favorite_store

    def search_airports(self, query: str) -> LiveQuery[List[AirportModel]]:
        return self.airports.search_airports(query)

    def get_all_airports(self) -> LiveQuery[List[AirportModel]]:
        return self.airports.get_all_airports()

    def get_destinations_except(self, code: str) -> LiveQuery[List[AirportModel]]:
        return self.airports.get_all_airports_except(code)

    async def get_airport_by_code(self, code: str) -> Optional[AirportModel]:
        return await self.airports.get_airport_by_code(code)

    def get_all_favorites(self) -> LiveQuery[List[FavoriteRouteModel]]:
        return self.favorites.get_all_favorites()

    async def add_favorite(self, departure_code: str, destination_code: str) -> FavoriteRouteModel:
        return await self.favorites.insert_favorite(departure_code, destination_code)

    async def remove_favorite(self, departure_code: str, destination_code: str) -> bool:
        favorite = await self.favorites.get_favorite(departure_code, destination_code)
        if favorite is None:
            return False
        return await self.favorites.delete_favorite(favorite)

    async def is_favorite(self, departure_code: str, destination_code: str) -> bool:
        return await self.favorites.get_favorite(departure_code, destination_code) is not None
