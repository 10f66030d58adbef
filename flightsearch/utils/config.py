"""
Environment configuration loader with validation for the flight search app.
"""

import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from ..cache.config import ValkeyConfig
from ..models.enums import PreferenceBackend


class FlightSearchConfig(BaseModel):
    """Configuration model for the flight search application with validation."""

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///flightsearch.db", description="Database connection URL"
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    seed_sample_data: bool = Field(
        default=True, description="Load bundled airports into an empty database"
    )
    airports_csv: Optional[str] = Field(
        default=None, description="CSV file to seed airports from instead of the bundled list"
    )

    # Preference storage
    preference_backend: PreferenceBackend = Field(
        default=PreferenceBackend.DATABASE, description="Where the last query is saved"
    )

    # Valkey Configuration
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(
        default=6379, ge=1, le=65535, description="Valkey server port"
    )
    valkey_password: Optional[str] = Field(
        default=None, description="Valkey server password"
    )
    valkey_database: int = Field(
        default=0, ge=0, le=15, description="Valkey database number"
    )
    valkey_key_prefix: str = Field(
        default="flightsearch", description="Namespace for Valkey keys"
    )

    # Application
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v:
            raise ValueError("DATABASE_URL is required")
        return v

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def valkey_config(self) -> ValkeyConfig:
        """Valkey connection settings derived from this configuration."""
        return ValkeyConfig(
            host=self.valkey_host,
            port=self.valkey_port,
            password=self.valkey_password,
            database=self.valkey_database,
            key_prefix=self.valkey_key_prefix,
        )


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[str] = None) -> FlightSearchConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        FlightSearchConfig: Validated configuration object

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    try:
        config_data: Dict[str, Any] = {
            "database_url": os.getenv("DATABASE_URL", "sqlite:///flightsearch.db"),
            "database_echo": _env_flag("DATABASE_ECHO", "false"),
            "seed_sample_data": _env_flag("SEED_SAMPLE_DATA", "true"),
            "airports_csv": os.getenv("AIRPORTS_CSV") or None,
            "preference_backend": os.getenv("PREFERENCE_BACKEND", "database").lower(),
            "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
            "valkey_port": int(os.getenv("VALKEY_PORT", "6379")),
            "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
            "valkey_database": int(os.getenv("VALKEY_DATABASE", "0")),
            "valkey_key_prefix": os.getenv("VALKEY_KEY_PREFIX", "flightsearch"),
            "debug": _env_flag("FLIGHTSEARCH_DEBUG", "false"),
            "log_level": os.getenv("FLIGHTSEARCH_LOG_LEVEL", "INFO"),
        }
        return FlightSearchConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


# Global configuration instance
_config: Optional[FlightSearchConfig] = None


def get_config() -> FlightSearchConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        FlightSearchConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
