"""
Airport store backed by SQLAlchemy.

Every listing is ranked by descending passenger volume with the primary key
as tie-breaker, and is exposed as a LiveQuery so subscribers see later
writes to the airport table without re-polling.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..database.config import DatabaseConfig
from ..database.live import InvalidationTracker, LiveQuery
from ..database.models import Airport
from ..models.airport import AirportModel
from .errors import StoreError

logger = logging.getLogger(__name__)

AIRPORT_TABLE = Airport.__tablename__


class AirportStore:
    """Ranked substring search, exclusion listing and code lookup over airports."""

    def __init__(self, db_config: DatabaseConfig, tracker: InvalidationTracker):
        self.db = db_config
        self.tracker = tracker

    @staticmethod
    def _ranked(session: Session) -> Query:
        return session.query(Airport).order_by(Airport.passengers.desc(), Airport.id.asc())

    async def _fetch(self, build: Callable[[Session], Query]) -> List[AirportModel]:
        try:
            with self.db.get_session_context() as session:
                return [AirportModel.model_validate(row) for row in build(session).all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Airport query failed: {e}") from e

    def _live(self, build: Callable[[Session], Query], description: str) -> LiveQuery[List[AirportModel]]:
        return LiveQuery(self.tracker, (AIRPORT_TABLE,), lambda: self._fetch(build), description)

    def search_airports(self, query: str) -> LiveQuery[List[AirportModel]]:
        """
        Airports whose IATA code or name contains ``query``, ignoring case.

        Wildcard characters in ``query`` are matched literally.
        """
        def build(session: Session) -> Query:
            return self._ranked(session).filter(
                or_(
                    Airport.iata_code.icontains(query, autoescape=True),
                    Airport.name.icontains(query, autoescape=True),
                )
            )

        return self._live(build, f"search_airports({query!r})")

    def get_all_airports_except(self, code: str) -> LiveQuery[List[AirportModel]]:
        """All airports except the one whose IATA code equals ``code``."""
        return self._live(
            lambda session: self._ranked(session).filter(Airport.iata_code != code),
            f"get_all_airports_except({code!r})",
        )

    def get_all_airports(self) -> LiveQuery[List[AirportModel]]:
        return self._live(self._ranked, "get_all_airports()")

    async def get_airport_by_code(self, code: str) -> Optional[AirportModel]:
        """Exact, case-sensitive lookup by IATA code."""
        try:
            with self.db.get_session_context() as session:
                row = session.query(Airport).filter(Airport.iata_code == code).first()
                return AirportModel.model_validate(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Airport lookup failed for {code!r}: {e}") from e

    async def insert_airports(self, records: Iterable[Tuple[str, str, int]]) -> List[AirportModel]:
        """
        Insert ``(iata_code, name, passengers)`` records.

        Raises:
            StoreError: If any record violates the schema, nothing is inserted
        """
        try:
            with self.db.get_session_context() as session:
                rows = [
                    Airport(iata_code=code, name=name, passengers=passengers)
                    for code, name, passengers in records
                ]
                session.add_all(rows)
                session.flush()
                inserted = [AirportModel.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Airport insert failed: {e}") from e

        await self.tracker.notify(AIRPORT_TABLE)
        logger.info(f"Inserted {len(inserted)} airports")
        return inserted
