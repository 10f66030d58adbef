"""
Database package for the flight search system.

This package provides the SQLAlchemy models, database configuration and
live-query support used by the stores.
"""

from .models import (
    Base,
    Airport,
    Favorite,
    Preference,
    create_all_tables,
    drop_all_tables
)

from .config import (
    DatabaseConfig,
    initialize_database,
)

from .live import (
    InvalidationTracker,
    LiveQuery,
)

from .seed import (
    SAMPLE_AIRPORTS,
    seed_airports,
    seed_sample_airports,
    read_airports_csv,
    import_airports_csv,
)

__all__ = [
    # Models
    'Base',
    'Airport',
    'Favorite',
    'Preference',
    'create_all_tables',
    'drop_all_tables',

    # Configuration
    'DatabaseConfig',
    'initialize_database',

    # Live queries
    'InvalidationTracker',
    'LiveQuery',

    # Seed data
    'SAMPLE_AIRPORTS',
    'seed_airports',
    'seed_sample_airports',
    'read_airports_csv',
    'import_airports_csv',
]
