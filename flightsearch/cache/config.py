"""
Connection settings for the Valkey preference backend.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class ValkeyConfig:
    """Where the Valkey server lives and how preference keys are namespaced."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 4
    socket_timeout: float = 5.0
    key_prefix: str = "flightsearch"

    @classmethod
    def from_env(cls) -> "ValkeyConfig":
        """Read ``VALKEY_*`` variables, falling back to the field defaults."""
        return cls(
            host=os.getenv("VALKEY_HOST", cls.host),
            port=int(os.getenv("VALKEY_PORT", cls.port)),
            password=os.getenv("VALKEY_PASSWORD") or None,
            database=int(os.getenv("VALKEY_DATABASE", cls.database)),
            key_prefix=os.getenv("VALKEY_KEY_PREFIX", cls.key_prefix),
        )

    def to_connection_pool_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments for ``valkey.ConnectionPool``.

        Raises:
            ValkeyConfigurationError: If no host is configured
        """
        if not self.host:
            raise ValkeyConfigurationError("Valkey host is required")

        kwargs: Dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            db=self.database,
            max_connections=self.max_connections,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_timeout,
            # Saved queries are plain text
            decode_responses=True,
        )
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def build_key(self, *parts: Any) -> str:
        """``build_key("pref", "search_query")`` -> ``"flightsearch:pref:search_query"``."""
        return ":".join([self.key_prefix, *(str(p) for p in parts if p is not None)])

    def __str__(self) -> str:
        auth = "with password" if self.password else "no password"
        return f"valkey://{self.host}:{self.port}/{self.database} ({auth}, prefix={self.key_prefix!r})"


class ValkeyConnectionError(Exception):
    """The Valkey server could not be reached."""
    pass


class ValkeyConfigurationError(Exception):
    """The Valkey settings cannot produce a connection."""
    pass
