"""
Flight search Pydantic models package.

This package contains the immutable Pydantic v2 models handed out by the
stores and published by the search controller.
"""

# Enums
from .enums import (
    DisplayMode,
    PreferenceBackend,
)

# Records
from .airport import AirportModel
from .favorite import FavoriteRouteModel
from .route import RouteCardModel

# Published state
from .ui_state import SearchUiState

__all__ = [
    # Enums
    "DisplayMode",
    "PreferenceBackend",

    # Records
    "AirportModel",
    "FavoriteRouteModel",
    "RouteCardModel",

    # State
    "SearchUiState",
]
