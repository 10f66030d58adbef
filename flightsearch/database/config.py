"""
Engine and session handling for the flight search database.

The stores open one short-lived session per call through
``get_session_context``. SQLite is the default; any SQLAlchemy URL works
when its driver is installed.
"""

import os
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import create_all_tables

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///flightsearch.db"


class DatabaseConfig:
    """
    Owner of the engine and session factory for one database URL.

    The URL falls back to ``DATABASE_URL`` and then to a ``flightsearch.db``
    file in the working directory.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.database_url = database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self) -> None:
        """Create the engine and session factory; a no-op when already done."""
        if self.is_initialized:
            return

        if self.is_sqlite:
            # All sessions share one connection, so ":memory:" keeps its tables
            engine = create_engine(
                self.database_url,
                echo=self.echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            engine = create_engine(self.database_url, echo=self.echo, pool_pre_ping=True)

        self.engine = engine
        # Rows are converted to Pydantic models after the commit
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Database engine ready for {engine.url.render_as_string(hide_password=True)}")

    def create_tables(self) -> None:
        self.initialize()
        create_all_tables(self.engine)
        logger.info("Airport, favorite and preference tables created")

    def get_session(self) -> Session:
        self.initialize()
        return self._sessions()

    @contextmanager
    def get_session_context(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on any error."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self._sessions = None
            logger.info("Database connections closed")


def initialize_database(
    database_url: Optional[str] = None,
    echo: bool = False,
    create_tables: bool = True,
) -> DatabaseConfig:
    """Build a DatabaseConfig, connect it and optionally create the tables."""
    db_config = DatabaseConfig(database_url=database_url, echo=echo)
    db_config.initialize()
    if create_tables:
        db_config.create_tables()
    return db_config
