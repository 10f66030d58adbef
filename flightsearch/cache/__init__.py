"""
Valkey caching layer for the flight search application.

This module contains the Valkey configuration and client used by the
Valkey-backed preference store.
"""

from .config import ValkeyConfig, ValkeyConnectionError, ValkeyConfigurationError
from .client import ValkeyClient

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyConnectionError",
    "ValkeyConfigurationError",

    # Client
    "ValkeyClient",
]
