"""
Enums for the flight search application.

This module contains the enumeration types shared by the search state
and the presentation wiring.
"""

from enum import Enum


class DisplayMode(str, Enum):
    """Mutually exclusive display modes of the search screen."""
    IDLE = "idle"                # Blank query, nothing selected, no favorites
    SUGGESTING = "suggesting"    # Query typed, waiting for a departure pick
    SELECTED = "selected"        # Departure picked, destinations listed
    FAVORITES = "favorites"      # Blank query, favorites available


class PreferenceBackend(str, Enum):
    """Storage backends available for the saved search query."""
    DATABASE = "database"
    VALKEY = "valkey"
