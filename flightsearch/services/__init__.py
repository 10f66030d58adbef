"""
Business logic services for the flight search application.

This module contains the search controller and the holder for the state it
publishes.
"""

from .state import UiStateHolder, StateListener
from .search_controller import SearchController, ControllerClosedError

__all__ = [
    'UiStateHolder',
    'StateListener',
    'SearchController',
    'ControllerClosedError',
]
