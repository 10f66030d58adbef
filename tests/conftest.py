"""
Shared fixtures for the flight search test suite.

Every database fixture uses a fresh in-memory SQLite engine, so tests never
touch a file on disk and never see each other's rows.
"""

from typing import List

import pytest

from flightsearch.database import (
    SAMPLE_AIRPORTS,
    InvalidationTracker,
    initialize_database,
    seed_sample_airports,
)
from flightsearch.stores import (
    AirportStore,
    DatabasePreferenceStore,
    FavoriteStore,
    FlightRepository,
)


@pytest.fixture
def db_config():
    """Create an initialized in-memory database with all tables."""
    config = initialize_database("sqlite:///:memory:")
    yield config
    config.close()


@pytest.fixture
def seeded_db(db_config):
    """In-memory database holding the bundled sample airports."""
    seed_sample_airports(db_config)
    return db_config


@pytest.fixture
def tracker():
    return InvalidationTracker()


@pytest.fixture
def airport_store(seeded_db, tracker):
    return AirportStore(seeded_db, tracker)


@pytest.fixture
def favorite_store(seeded_db, tracker):
    return FavoriteStore(seeded_db, tracker)


@pytest.fixture
def repository(airport_store, favorite_store):
    return FlightRepository(airport_store, favorite_store)


@pytest.fixture
def preference_store(seeded_db):
    return DatabasePreferenceStore(seeded_db)


@pytest.fixture
def ranked_sample_codes() -> List[str]:
    """Sample airport codes in descending passenger order."""
    return [code for code, _, _ in sorted(SAMPLE_AIRPORTS, key=lambda row: -row[2])]

