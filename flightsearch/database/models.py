"""
SQLAlchemy database models for the flight search system.

This module defines the tables behind the stores:
- Airport: Airports with IATA code, name and yearly passenger volume
- Favorite: Saved departure/destination pairs, unique per pair
- Preference: Single-string key/value settings such as the last search query
"""

from sqlalchemy import Column, Integer, String, Text, Index, UniqueConstraint
from sqlalchemy.orm import declarative_base

# Create the declarative base for all models
Base = declarative_base()


class Airport(Base):
    """
    Airport model representing airport information.

    Passenger volume drives the ranking of every airport listing, so the
    column is indexed together with the primary key used as tie-breaker.
    """
    __tablename__ = 'airport'

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Airport identification
    iata_code = Column(String(3), unique=True, nullable=False, index=True)  # 3-letter IATA code (e.g., 'MUC')
    name = Column(String(120), nullable=False, index=True)  # Airport name

    # Ranking
    passengers = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Airport(id={self.id}, iata_code='{self.iata_code}', name='{self.name}', passengers={self.passengers})>"


class Favorite(Base):
    """
    Favorite model representing a saved route.

    Rows are created and deleted by user action, never updated.
    """
    __tablename__ = 'favorite'
    __table_args__ = (
        UniqueConstraint('departure_code', 'destination_code', name='uq_favorite_route'),
    )

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Route
    departure_code = Column(String(3), nullable=False)
    destination_code = Column(String(3), nullable=False)

    def __repr__(self):
        return f"<Favorite(id={self.id}, route='{self.departure_code}->{self.destination_code}')>"


class Preference(Base):
    """Preference model storing one string value per key."""
    __tablename__ = 'preference'

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<Preference(key='{self.key}')>"


Index('idx_airport_ranking', Airport.passengers.desc(), Airport.id)


# Metadata for table creation and schema management
def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine):
    """
    Drop all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.drop_all(bind=engine)


# Export all models and utilities
__all__ = [
    'Base',
    'Airport',
    'Favorite',
    'Preference',
    'create_all_tables',
    'drop_all_tables'
]
