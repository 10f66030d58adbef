"""
Favorite route store backed by SQLAlchemy.

At most one row exists per (departure_code, destination_code) pair. Inserting
an existing pair is a no-op, not an error, and concurrent inserts of the same
pair collapse onto the unique constraint.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.config import DatabaseConfig
from ..database.live import InvalidationTracker, LiveQuery
from ..database.models import Favorite
from ..models.favorite import FavoriteRouteModel
from .errors import StoreError

logger = logging.getLogger(__name__)

FAVORITE_TABLE = Favorite.__tablename__


class FavoriteStore:
    """CRUD over favorite departure/destination pairs."""

    def __init__(self, db_config: DatabaseConfig, tracker: InvalidationTracker):
        self.db = db_config
        self.tracker = tracker

    @staticmethod
    def _find(session: Session, departure_code: str, destination_code: str) -> Optional[Favorite]:
        return (
            session.query(Favorite)
            .filter(
                Favorite.departure_code == departure_code,
                Favorite.destination_code == destination_code,
            )
            .first()
        )

    async def _fetch_all(self) -> List[FavoriteRouteModel]:
        try:
            with self.db.get_session_context() as session:
                rows = session.query(Favorite).order_by(Favorite.id.asc()).all()
                return [FavoriteRouteModel.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Favorite query failed: {e}") from e

    def get_all_favorites(self) -> LiveQuery[List[FavoriteRouteModel]]:
        """Every favorite in insertion order."""
        return LiveQuery(self.tracker, (FAVORITE_TABLE,), self._fetch_all, "get_all_favorites()")

    async def get_favorite(self, departure_code: str, destination_code: str) -> Optional[FavoriteRouteModel]:
        try:
            with self.db.get_session_context() as session:
                row = self._find(session, departure_code, destination_code)
                return FavoriteRouteModel.model_validate(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Favorite lookup failed: {e}") from e

    async def insert_favorite(self, departure_code: str, destination_code: str) -> FavoriteRouteModel:
        """
        Save a route, ignoring the call if the pair is already saved.

        Returns:
            FavoriteRouteModel: The stored record, new or pre-existing
        """
        try:
            with self.db.get_session_context() as session:
                existing = self._find(session, departure_code, destination_code)
                if existing is not None:
                    logger.debug(f"Favorite {departure_code}->{destination_code} already saved")
                    return FavoriteRouteModel.model_validate(existing)

                row = Favorite(departure_code=departure_code, destination_code=destination_code)
                session.add(row)
                session.flush()
                record = FavoriteRouteModel.model_validate(row)
        except IntegrityError:
            # Lost a race against another insert of the same pair
            existing = await self.get_favorite(departure_code, destination_code)
            if existing is None:
                raise StoreError(f"Favorite insert failed for {departure_code}->{destination_code}")
            return existing
        except SQLAlchemyError as e:
            raise StoreError(f"Favorite insert failed: {e}") from e

        await self.tracker.notify(FAVORITE_TABLE)
        logger.info(f"Saved favorite {departure_code}->{destination_code}")
        return record

    async def delete_favorite(self, record: FavoriteRouteModel) -> bool:
        """
        Remove exactly ``record``.

        Returns:
            bool: False if the record no longer existed
        """
        try:
            with self.db.get_session_context() as session:
                deleted = session.query(Favorite).filter(Favorite.id == record.id).delete()
        except SQLAlchemyError as e:
            raise StoreError(f"Favorite delete failed: {e}") from e

        if deleted:
            await self.tracker.notify(FAVORITE_TABLE)
            logger.info(f"Removed favorite {record.departure_code}->{record.destination_code}")
        return bool(deleted)
