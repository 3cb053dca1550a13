"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
memoizer and its storage backends.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from memocache.core.config.constants import (
    REDIS_DEFAULT_CONNECT_RETRIES,
    REDIS_DEFAULT_CONNECT_TIMEOUT,
    REDIS_DEFAULT_HOST,
    REDIS_DEFAULT_PORT,
    StoreBackend,
)


class CacheSettings(BaseSettings):
    """
    Memoizer and in-memory store configuration.

    Bounds:
    - MEMO_MAX: maximum number of entries
    - MEMO_MAX_SIZE: maximum aggregate size (JSON length of the values)
    Only one of the two may be set.
    """

    MEMO_BACKEND: StoreBackend = Field(default=StoreBackend.LRU, description="Storage backend")
    MEMO_MAX: int | None = Field(default=None, description="Maximum entry count")
    MEMO_MAX_SIZE: int | None = Field(default=None, description="Maximum aggregate entry size")
    MEMO_MAX_AGE: float | None = Field(default=None, description="Entry TTL in seconds")
    MEMO_QUEUE_ENABLED: bool = Field(default=True, description="Coalesce concurrent misses")
    MEMO_CACHE_ID: int | None = Field(default=None, description="Instance id for key namespacing")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ResetSettings(BaseSettings):
    """
    Scheduled full-store reset.

    The reset is lazy: it fires on the first call after the scheduled time.
    """

    MEMO_RESET_INTERVAL: float | None = Field(default=None, description="Reset interval in seconds")
    MEMO_RESET_FIRST_IN: float | None = Field(
        default=None, description="Seconds until the first reset (default: one interval)"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class RedisSettings(BaseSettings):
    """
    Redis connection configuration for the remote store.

    REDIS_URL takes precedence over REDIS_HOST / REDIS_PORT.
    REDIS_PROXY_COMPAT enables twemproxy compatibility (no FLUSHDB, no DBSIZE).
    """

    REDIS_URL: str | None = Field(default=None, description="Redis connection URL")
    REDIS_HOST: str = Field(default=REDIS_DEFAULT_HOST, description="Redis server host")
    REDIS_PORT: int = Field(default=REDIS_DEFAULT_PORT, description="Redis server port")
    REDIS_DB: int | None = Field(default=None, description="Redis database number")
    REDIS_PROXY_COMPAT: bool = Field(default=False, description="twemproxy compatibility mode")
    REDIS_CONNECT_TIMEOUT: float = Field(
        default=REDIS_DEFAULT_CONNECT_TIMEOUT, description="Connection timeout in seconds"
    )
    REDIS_CONNECT_RETRIES: int = Field(
        default=REDIS_DEFAULT_CONNECT_RETRIES, description="Connection attempts before giving up"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from memocache.core.config.settings import get_settings

        settings = get_settings()
        max_entries = settings.cache.MEMO_MAX
        redis_host = settings.redis.REDIS_HOST
    """

    # Cache settings
    MEMO_BACKEND: StoreBackend = Field(default=StoreBackend.LRU, description="Storage backend")
    MEMO_MAX: int | None = Field(default=None, description="Maximum entry count")
    MEMO_MAX_SIZE: int | None = Field(default=None, description="Maximum aggregate entry size")
    MEMO_MAX_AGE: float | None = Field(default=None, description="Entry TTL in seconds")
    MEMO_QUEUE_ENABLED: bool = Field(default=True, description="Coalesce concurrent misses")
    MEMO_CACHE_ID: int | None = Field(default=None, description="Instance id for key namespacing")

    # Reset settings
    MEMO_RESET_INTERVAL: float | None = Field(default=None, description="Reset interval in seconds")
    MEMO_RESET_FIRST_IN: float | None = Field(
        default=None, description="Seconds until the first reset (default: one interval)"
    )

    # Redis settings
    REDIS_URL: str | None = Field(default=None, description="Redis connection URL")
    REDIS_HOST: str = Field(default=REDIS_DEFAULT_HOST, description="Redis server host")
    REDIS_PORT: int = Field(default=REDIS_DEFAULT_PORT, description="Redis server port")
    REDIS_DB: int | None = Field(default=None, description="Redis database number")
    REDIS_PROXY_COMPAT: bool = Field(default=False, description="twemproxy compatibility mode")
    REDIS_CONNECT_TIMEOUT: float = Field(
        default=REDIS_DEFAULT_CONNECT_TIMEOUT, description="Connection timeout in seconds"
    )
    REDIS_CONNECT_RETRIES: int = Field(
        default=REDIS_DEFAULT_CONNECT_RETRIES, description="Connection attempts before giving up"
    )

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # Nested configuration objects
    @property
    def cache(self) -> "CacheSettings":
        """Get cache settings."""
        return CacheSettings(
            MEMO_BACKEND=self.MEMO_BACKEND,
            MEMO_MAX=self.MEMO_MAX,
            MEMO_MAX_SIZE=self.MEMO_MAX_SIZE,
            MEMO_MAX_AGE=self.MEMO_MAX_AGE,
            MEMO_QUEUE_ENABLED=self.MEMO_QUEUE_ENABLED,
            MEMO_CACHE_ID=self.MEMO_CACHE_ID,
        )

    @property
    def reset(self) -> "ResetSettings":
        """Get reset schedule settings."""
        return ResetSettings(
            MEMO_RESET_INTERVAL=self.MEMO_RESET_INTERVAL,
            MEMO_RESET_FIRST_IN=self.MEMO_RESET_FIRST_IN,
        )

    @property
    def redis(self) -> "RedisSettings":
        """Get Redis settings."""
        return RedisSettings(
            REDIS_URL=self.REDIS_URL,
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PROXY_COMPAT=self.REDIS_PROXY_COMPAT,
            REDIS_CONNECT_TIMEOUT=self.REDIS_CONNECT_TIMEOUT,
            REDIS_CONNECT_RETRIES=self.REDIS_CONNECT_RETRIES,
        )

    @property
    def logging(self) -> "LoggingSettings":
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
