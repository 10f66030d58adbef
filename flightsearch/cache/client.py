"""
Lazily connected Valkey client for the preference store.

The client connects on first use, retrying with exponential backoff. A
failed command drops the connection so the next call reconnects.
"""

import asyncio
import logging
from typing import Optional

import valkey
from valkey.connection import ConnectionPool
from valkey.exceptions import ValkeyError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


class ValkeyClient:
    """Pooled ``valkey.Valkey`` handle with reconnect-on-demand."""

    def __init__(
        self,
        config: Optional[ValkeyConfig] = None,
        max_connection_attempts: int = 5,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ):
        self.config = config or ValkeyConfig.from_env()
        self.max_connection_attempts = max_connection_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[valkey.Valkey] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> valkey.Valkey:
        """
        The connected client.

        Raises:
            ValkeyConnectionError: If ``connect()`` has not succeeded
        """
        if self._client is None:
            raise ValkeyConnectionError("Valkey client is not connected")
        return self._client

    def _open(self) -> valkey.Valkey:
        self._pool = ConnectionPool(**self.config.to_connection_pool_kwargs())
        client = valkey.Valkey(connection_pool=self._pool)
        if not client.ping():
            raise ValkeyConnectionError("Ping returned False")
        return client

    async def connect(self) -> None:
        """
        Connect, retrying with doubling delays capped at ``max_delay``.

        Raises:
            ValkeyConnectionError: After ``max_connection_attempts`` failures
        """
        if self._client is not None:
            return

        for attempt in range(1, self.max_connection_attempts + 1):
            try:
                self._client = self._open()
                logger.info(f"Connected to {self.config}")
                return
            except (ValkeyError, OSError, ValkeyConnectionError) as e:
                await self.disconnect()
                if attempt == self.max_connection_attempts:
                    raise ValkeyConnectionError(
                        f"Failed to connect to {self.config} after {attempt} attempts: {e}"
                    ) from e
                delay = min(self.base_delay * 2 ** (attempt - 1), self.max_delay)
                logger.warning(f"Valkey connect attempt {attempt} failed ({e}), retrying in {delay:.1f}s")
                await asyncio.sleep(delay)

    async def ensure_connection(self) -> None:
        await self.connect()

    async def disconnect(self) -> None:
        """Drop the pool; the next ``ensure_connection`` opens a new one."""
        pool, self._pool, self._client = self._pool, None, None
        if pool is not None:
            pool.disconnect()
            logger.debug("Valkey connection pool closed")
