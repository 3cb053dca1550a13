"""
Redis Store

Architecture:
    RedisStore (CacheStore implementation)
        ├── ConnectionManager (connection lifecycle, database selection)
        └── key namespacing + JSON serialization

Persisted layout:
    - Keys:   memo:<cache_id>:<key>
    - Values: JSON text (orjson), written with SET ... EX <ttl>
    - TTL:    max_age seconds (default 60)

twemproxy compatibility mode:
    - No database selection by cache id
    - reset() is rejected (FLUSHDB is not proxied)
    - keycount() is unknown (-1)
"""

from typing import Any

import orjson
import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from memocache.core.config.constants import (
    REDIS_DEFAULT_MAX_AGE,
    REDIS_KEY_PREFIX,
    REDIS_RETRY_BASE_DELAY,
    REDIS_RETRY_MAX_DELAY,
    Stage,
)
from memocache.core.config.options import RedisOptions
from memocache.core.exceptions import (
    CacheConnectionError,
    CacheKeyError,
    CacheResetError,
    ConfigurationError,
)
from memocache.core.logging.logger import get_logger, log_stage, preview_key

logger = get_logger(__name__)


# =============================================================================
# LAYER 1: CONNECTION MANAGEMENT
# =============================================================================


class ConnectionManager:
    """
    Manages Redis connection lifecycle and pooling.

    Database selection:
    - explicit database option, else
    - the cache id, unless in proxy compatibility mode (proxies only expose db 0)
    """

    def __init__(self, options: RedisOptions, cache_id: int, client: redis.Redis | None = None):
        """
        Initialize connection manager.

        Args:
            options: Redis connection options
            cache_id: Instance id (default database number)
            client: Pre-built client (skips pool creation)
        """
        self._options = options
        self._cache_id = cache_id
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = client
        self._is_connected = False

    @property
    def database(self) -> int | None:
        if self._options.database is not None:
            return self._options.database
        if not self._options.proxy_compat:
            return self._cache_id
        return None

    def _build_pool(self) -> ConnectionPool:
        pool_kwargs: dict[str, Any] = {
            "socket_connect_timeout": self._options.connect_timeout,
            "decode_responses": True,
        }
        if self.database is not None:
            pool_kwargs["db"] = self.database

        if self._options.url:
            return ConnectionPool.from_url(self._options.url, **pool_kwargs)

        return ConnectionPool(host=self._options.host, port=self._options.port, **pool_kwargs)

    async def connect(self) -> redis.Redis:
        """
        Establish connection to Redis.

        Returns:
            redis.Redis: Connected Redis client

        Raises:
            CacheConnectionError: If connection fails
        """
        if self._is_connected and self._client:
            return self._client

        if self._client is None:
            self._pool = self._build_pool()
            self._client = redis.Redis(connection_pool=self._pool)

        client = self._client

        @retry(
            stop=stop_after_attempt(self._options.connect_retries),
            wait=wait_exponential_jitter(
                multiplier=REDIS_RETRY_BASE_DELAY, max=REDIS_RETRY_MAX_DELAY, jitter=REDIS_RETRY_BASE_DELAY
            ),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            reraise=True,
            before_sleep=lambda retry_state: log_stage(
                logger, Stage.REDIS_RETRY, "Retrying Redis connection", level="warning",
                attempt=retry_state.attempt_number,
                delay=round(retry_state.idle_for, 3),
            ),
        )
        async def _ping():
            await client.ping()

        try:
            await _ping()
            self._is_connected = True

            log_stage(
                logger, Stage.REDIS_CONNECT, "Redis connected",
                url=self._options.url, host=self._options.host,
                port=self._options.port, database=self.database,
            )
            return self._client

        except (ConnectionError, TimeoutError) as e:
            self._is_connected = False
            log_stage(logger, Stage.REDIS_CONNECT, "Failed to connect to Redis", level="error", error=str(e))
            raise CacheConnectionError(
                message=f"Failed to connect to Redis: {e}",
                details={"host": self._options.host, "port": self._options.port, "url": self._options.url},
            )

    async def disconnect(self) -> None:
        """Close Redis connection and pool."""
        if self._client:
            await self._client.aclose()

        if self._pool:
            await self._pool.disconnect()

        self._is_connected = False
        log_stage(logger, Stage.REDIS_CLOSE, "Redis disconnected")

    def get_client(self) -> redis.Redis:
        """
        Get the client, building the pool on first use.

        The pool opens sockets on demand and reconnects after a dropped
        connection, so commands are issued even while is_connected() is
        False. connect() only adds the startup ping.
        """
        if self._client is None:
            log_stage(
                logger, Stage.REDIS_CONNECT, "Redis used before connect(), connecting on first command",
                level="warning", host=self._options.host, port=self._options.port, url=self._options.url,
            )
            self._pool = self._build_pool()
            self._client = redis.Redis(connection_pool=self._pool)
        return self._client

    def mark_connected(self, connected: bool) -> None:
        self._is_connected = connected

    def is_connected(self) -> bool:
        return self._is_connected


# =============================================================================
# LAYER 2: STORE
# =============================================================================


class RedisStore:
    """
    Remote cache store backed by Redis.

    Usage:
        store = RedisStore(RedisOptions(host="cache"), cache_id=7, max_age=300)
        await store.connect()

        await store.set("key", {"id": 1})
        value, present = await store.get("key")
    """

    def __init__(
        self,
        options: RedisOptions,
        cache_id: int,
        max_age: float | None = None,
        client: redis.Redis | None = None,
    ):
        """
        Initialize Redis store.

        Args:
            options: Redis connection options
            cache_id: Integer instance id used for namespacing
            max_age: Entry TTL in seconds (default 60)
            client: Pre-built client (mainly for tests)

        Raises:
            ConfigurationError: If cache_id is not an integer
        """
        if isinstance(cache_id, bool) or not isinstance(cache_id, int):
            raise ConfigurationError(
                f"Specify an integer cache id for persistence across restarts, not {cache_id!r}"
            )

        self._options = options
        self._conn_mgr = ConnectionManager(options, cache_id, client=client)
        self._prefix = f"{REDIS_KEY_PREFIX}:{cache_id}:"
        self._ttl = max(1, int(max_age or REDIS_DEFAULT_MAX_AGE))
        self._keylen = 0

        if options.proxy_compat:
            log_stage(
                logger, Stage.REDIS_INIT,
                "twemproxy compat mode, key statistics and reset are not available",
                level="warning",
            )

    @classmethod
    def from_options(cls, options) -> "RedisStore":
        """Build a store from CacheOptions."""
        return cls(options.redis, cache_id=options.id, max_age=options.max_age)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def ttl(self) -> int:
        return self._ttl

    def _key(self, key: str) -> str:
        return self._prefix + key

    async def connect(self) -> None:
        """
        Connect and sample the key count.

        Raises:
            CacheConnectionError: If connection fails
        """
        client = await self._conn_mgr.connect()

        if not self._options.proxy_compat:
            try:
                self._keylen = await client.dbsize()
            except RedisError as e:
                log_stage(logger, Stage.REDIS_CONNECT, "DBSIZE failed", level="warning", error=str(e))

    async def close(self) -> None:
        await self._conn_mgr.disconnect()

    def _command_failed(self, e: RedisError) -> None:
        if isinstance(e, (ConnectionError, TimeoutError)):
            self._conn_mgr.mark_connected(False)

    def _command_succeeded(self) -> None:
        if not self._conn_mgr.is_connected():
            log_stage(logger, Stage.REDIS_CONNECT, "Redis connection recovered")
            self._conn_mgr.mark_connected(True)

    async def get(self, key: str) -> tuple[Any, bool]:
        """
        Get and decode a value.

        Raises:
            CacheKeyError: If the command fails or the value is not valid JSON
        """
        client = self._conn_mgr.get_client()
        full_key = self._key(key)
        log_stage(logger, Stage.REDIS_GET, "Getting key", level="debug", cache_key=preview_key(full_key))

        try:
            data = await client.get(full_key)
        except RedisError as e:
            self._command_failed(e)
            raise CacheKeyError(message=f"Redis GET failed: {e}", details={"key": full_key})
        self._command_succeeded()

        if not data:
            return None, False

        try:
            return orjson.loads(data), True
        except orjson.JSONDecodeError as e:
            raise CacheKeyError(message=f"Cannot decode cached value: {e}", details={"key": full_key})

    async def set(self, key: str, value: Any) -> None:
        """
        Encode and store a value with the configured TTL.

        Raises:
            CacheKeyError: If the value cannot be encoded or the command fails
        """
        client = self._conn_mgr.get_client()
        full_key = self._key(key)

        try:
            payload = orjson.dumps(value)
        except TypeError as e:
            raise CacheKeyError(message=f"Cannot encode value: {e}", details={"key": full_key})

        log_stage(logger, Stage.REDIS_SET, "Setting key", level="debug", cache_key=preview_key(full_key), ttl=self._ttl)

        try:
            await client.set(full_key, payload, ex=self._ttl)
        except RedisError as e:
            self._command_failed(e)
            raise CacheKeyError(message=f"Redis SET failed: {e}", details={"key": full_key})
        self._command_succeeded()

    async def expire(self, key: str) -> None:
        """
        Remove a key.

        Raises:
            CacheKeyError: If the command fails
        """
        client = self._conn_mgr.get_client()
        full_key = self._key(key)
        log_stage(logger, Stage.REDIS_EXPIRE, "Deleting key", level="debug", cache_key=preview_key(full_key))

        try:
            await client.delete(full_key)
        except RedisError as e:
            self._command_failed(e)
            raise CacheKeyError(message=f"Redis EXPIRE failed: {e}", details={"key": full_key})
        self._command_succeeded()

    async def reset(self) -> None:
        """
        Flush the selected database.

        Raises:
            CacheResetError: In proxy compatibility mode or if FLUSHDB fails
        """
        if self._options.proxy_compat:
            raise CacheResetError(message="Reset is not possible in twemproxy compat mode")

        client = self._conn_mgr.get_client()
        log_stage(logger, Stage.REDIS_RESET, "Flushing database", database=self._conn_mgr.database)

        try:
            await client.flushdb()
        except RedisError as e:
            self._command_failed(e)
            log_stage(logger, Stage.REDIS_RESET, "FLUSHDB failed", level="error", error=str(e))
            raise CacheResetError(message=f"Redis FLUSHDB failed: {e}")
        self._keylen = 0
        self._command_succeeded()

    def ready(self) -> bool:
        return self._conn_mgr.is_connected()

    def keycount(self) -> int:
        if self._options.proxy_compat:
            return -1
        return self._keylen

    def size(self) -> int:
        return 0
