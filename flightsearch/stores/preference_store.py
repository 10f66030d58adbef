"""
Durable storage of the last search query.

Two backends share the same contract: a row in the ``preference`` table, or a
string key in Valkey. Both return an empty string when nothing was saved.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from valkey.exceptions import ValkeyError

from ..cache.client import ValkeyClient
from ..cache.config import ValkeyConfig, ValkeyConnectionError
from ..database.config import DatabaseConfig
from ..database.models import Preference
from ..models.enums import PreferenceBackend
from .errors import PreferenceStoreError

logger = logging.getLogger(__name__)

SEARCH_QUERY_KEY = "search_query"


class PreferenceStore(ABC):
    """Single-string get/set with overwrite semantics."""

    @abstractmethod
    async def get_saved_query(self) -> str:
        """Return the saved query, or ``""`` if none was ever saved."""

    @abstractmethod
    async def save_query(self, value: str) -> None:
        """Durably replace the saved query with ``value``."""

    async def close(self) -> None:
        """Release any connection held by the store."""


class DatabasePreferenceStore(PreferenceStore):
    """Saved query kept in the ``preference`` table."""

    def __init__(self, db_config: DatabaseConfig, key: str = SEARCH_QUERY_KEY):
        self.db = db_config
        self.key = key

    async def get_saved_query(self) -> str:
        try:
            with self.db.get_session_context() as session:
                row = session.get(Preference, self.key)
                return row.value if row else ""
        except SQLAlchemyError as e:
            raise PreferenceStoreError(f"Failed to read preference {self.key!r}: {e}") from e

    async def save_query(self, value: str) -> None:
        try:
            with self.db.get_session_context() as session:
                session.merge(Preference(key=self.key, value=value))
        except SQLAlchemyError as e:
            raise PreferenceStoreError(f"Failed to save preference {self.key!r}: {e}") from e
        logger.debug(f"Saved preference {self.key}={value!r}")


class ValkeyPreferenceStore(PreferenceStore):
    """Saved query kept under ``<prefix>:pref:<key>`` in Valkey."""

    def __init__(self, client: ValkeyClient, key: str = SEARCH_QUERY_KEY):
        self.client = client
        self.cache_key = client.config.build_key("pref", key)

    async def get_saved_query(self) -> str:
        try:
            await self.client.ensure_connection()
            value = self.client.client.get(self.cache_key)
        except (ValkeyError, ValkeyConnectionError) as e:
            await self.client.disconnect()
            raise PreferenceStoreError(f"Failed to read {self.cache_key}: {e}") from e
        return value or ""

    async def save_query(self, value: str) -> None:
        try:
            await self.client.ensure_connection()
            self.client.client.set(self.cache_key, value)
        except (ValkeyError, ValkeyConnectionError) as e:
            await self.client.disconnect()
            raise PreferenceStoreError(f"Failed to save {self.cache_key}: {e}") from e
        logger.debug(f"Saved {self.cache_key}={value!r}")

    async def close(self) -> None:
        await self.client.disconnect()


def create_preference_store(
    backend: PreferenceBackend,
    db_config: DatabaseConfig,
    valkey_config: Optional[ValkeyConfig] = None,
) -> PreferenceStore:
    """
    Build the preference store for ``backend``.

    The Valkey client is created unconnected; it connects on first use.
    """
    if PreferenceBackend(backend) is PreferenceBackend.VALKEY:
        logger.info("Using Valkey preference store")
        return ValkeyPreferenceStore(ValkeyClient(valkey_config))
    logger.info("Using database preference store")
    return DatabasePreferenceStore(db_config)
