"""
Memoizer Construction Options

Per-instance options for a Memoizer, validated with pydantic. Options can be
given explicitly or built from the environment-driven Settings.

Usage:
    options = CacheOptions(max=100, reset=ResetOptions(interval=3600))
    memoizer = Memoizer(options)

    # Remote store shared by every instance with cache id 7
    options = CacheOptions(id=7, max_age=300, redis=RedisOptions(host="cache"))
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from memocache.core.config.constants import (
    REDIS_DEFAULT_CONNECT_RETRIES,
    REDIS_DEFAULT_CONNECT_TIMEOUT,
    REDIS_DEFAULT_HOST,
    REDIS_DEFAULT_PORT,
    StoreBackend,
)
from memocache.core.config.settings import Settings, get_settings


class ResetOptions(BaseModel):
    """
    Scheduled reset configuration.

    first_reset:
    - datetime: absolute time of the first reset
    - timedelta: offset from construction time
    - float: absolute epoch seconds
    - None: one interval after construction
    """

    interval: float = Field(gt=0, description="Seconds between resets")
    first_reset: datetime | timedelta | float | None = None


class RedisOptions(BaseModel):
    """Connection parameters for the Redis store."""

    url: str | None = None
    host: str = REDIS_DEFAULT_HOST
    port: int = REDIS_DEFAULT_PORT
    database: int | None = None
    proxy_compat: bool = Field(default=False, description="twemproxy compatibility mode")
    connect_timeout: float = Field(default=REDIS_DEFAULT_CONNECT_TIMEOUT, gt=0)
    connect_retries: int = Field(default=REDIS_DEFAULT_CONNECT_RETRIES, ge=1)


class CacheOptions(BaseModel):
    """
    Options recognised by Memoizer.

    Bounded-by-count (max) and bounded-by-size (max_size) are mutually
    exclusive. A Redis store requires an integer id, which namespaces the
    keys of this instance on the shared server.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    max: int | None = Field(default=None, gt=0)
    max_size: int | None = Field(default=None, gt=0)
    max_age: float | None = Field(default=None, gt=0, description="Entry TTL in seconds")
    dispose: Callable[[str, Any], None] | None = None
    queue_enabled: bool = True
    reset: ResetOptions | None = None
    redis: RedisOptions | None = None
    id: int | None = None

    @model_validator(mode="after")
    def validate_combinations(self):
        """Reject option combinations the stores cannot honour."""
        if self.max is not None and self.max_size is not None:
            raise ValueError("Set either max (entry count) or max_size (aggregate size), not both")
        if self.redis is not None and self.id is None:
            raise ValueError("Specify an integer id for a redis store")
        if self.redis is not None and self.redis.proxy_compat and self.reset is not None:
            raise ValueError("Scheduled reset is not possible in proxy compatibility mode")
        return self

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CacheOptions":
        """
        Build options from environment settings.

        Args:
            settings: Settings instance (default: global settings)

        Returns:
            CacheOptions
        """
        settings = settings or get_settings()
        cache = settings.cache

        reset = None
        if settings.reset.MEMO_RESET_INTERVAL:
            first_in = settings.reset.MEMO_RESET_FIRST_IN
            reset = ResetOptions(
                interval=settings.reset.MEMO_RESET_INTERVAL,
                first_reset=timedelta(seconds=first_in) if first_in is not None else None,
            )

        redis = None
        if cache.MEMO_BACKEND == StoreBackend.REDIS:
            redis_settings = settings.redis
            redis = RedisOptions(
                url=redis_settings.REDIS_URL,
                host=redis_settings.REDIS_HOST,
                port=redis_settings.REDIS_PORT,
                database=redis_settings.REDIS_DB,
                proxy_compat=redis_settings.REDIS_PROXY_COMPAT,
                connect_timeout=redis_settings.REDIS_CONNECT_TIMEOUT,
                connect_retries=redis_settings.REDIS_CONNECT_RETRIES,
            )

        return cls(
            max=cache.MEMO_MAX,
            max_size=cache.MEMO_MAX_SIZE,
            max_age=cache.MEMO_MAX_AGE,
            queue_enabled=cache.MEMO_QUEUE_ENABLED,
            reset=reset,
            redis=redis,
            id=cache.MEMO_CACHE_ID,
        )
