"""
Data stores for the flight search application.

This package contains the airport, favorite and preference stores and the
repository that combines them for the search controller.
"""

from .errors import StoreError, PreferenceStoreError
from .airport_store import AirportStore, AIRPORT_TABLE
from .favorite_store import FavoriteStore, FAVORITE_TABLE
from .preference_store import (
    PreferenceStore,
    DatabasePreferenceStore,
    ValkeyPreferenceStore,
    create_preference_store,
    SEARCH_QUERY_KEY,
)
from .repository import FlightRepository

__all__ = [
    # Errors
    "StoreError",
    "PreferenceStoreError",

    # Stores
    "AirportStore",
    "AIRPORT_TABLE",
    "FavoriteStore",
    "FAVORITE_TABLE",
    "PreferenceStore",
    "DatabasePreferenceStore",
    "ValkeyPreferenceStore",
    "create_preference_store",
    "SEARCH_QUERY_KEY",

    # Repository
    "FlightRepository",
]
