"""
Flight search: airport autocomplete, destination listing and favorite routes.

A user types part of an airport name or code, picks a departure from ranked
suggestions, browses every destination reachable from it, and marks routes as
favorites. The last search query survives restarts.

The SearchController in ``flightsearch.services`` owns the screen state; the
stores in ``flightsearch.stores`` provide the data it reads.
"""

__version__ = "0.1.0"
