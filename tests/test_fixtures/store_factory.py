"""
Store Test Factory

Creates clocks, stores, Redis clients and wrapped operations with
controllable behavior for testing.
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import RedisError

from memocache.core.exceptions import CacheKeyError


class FakeClock:
    """Callable clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingOperation:
    """
    Async operation that records its calls.

    When gated, every call blocks until release() so tests can issue
    several calls while the first is still in flight.
    """

    def __init__(self, result=None, error: Exception | None = None, gated: bool = False):
        self.calls: list[tuple] = []
        self._result = result
        self._error = error
        self._gate = asyncio.Event()
        if not gated:
            self._gate.set()

    def release(self) -> None:
        self._gate.set()

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        await self._gate.wait()
        if self._error is not None:
            raise self._error
        if callable(self._result):
            return self._result(*args, **kwargs)
        return self._result

    @property
    def call_count(self) -> int:
        return len(self.calls)


class StoreTestFactory:
    """Factory for creating store test objects."""

    @staticmethod
    def in_memory_redis_client(initial_data: dict[str, Any] | None = None) -> AsyncMock:
        """Create a Redis client mock backed by a dict."""
        client = AsyncMock()
        client.data = dict(initial_data or {})
        client.ping = AsyncMock(return_value=True)

        async def mock_get(key):
            return client.data.get(key)

        async def mock_set(key, value, ex=None):
            client.data[key] = value
            return True

        async def mock_delete(key):
            return 1 if client.data.pop(key, None) is not None else 0

        async def mock_flushdb():
            client.data.clear()
            return True

        async def mock_dbsize():
            return len(client.data)

        client.get = AsyncMock(side_effect=mock_get)
        client.set = AsyncMock(side_effect=mock_set)
        client.delete = AsyncMock(side_effect=mock_delete)
        client.flushdb = AsyncMock(side_effect=mock_flushdb)
        client.dbsize = AsyncMock(side_effect=mock_dbsize)
        client.aclose = AsyncMock()
        return client

    @staticmethod
    def failing_redis_client(error: Exception | None = None) -> AsyncMock:
        """Create a connected Redis client whose data commands always fail."""
        error = error or RedisError("Redis command failed")
        client = AsyncMock()
        client.ping = AsyncMock(return_value=True)
        client.dbsize = AsyncMock(return_value=0)
        client.get = AsyncMock(side_effect=error)
        client.set = AsyncMock(side_effect=error)
        client.delete = AsyncMock(side_effect=error)
        client.flushdb = AsyncMock(side_effect=error)
        client.aclose = AsyncMock()
        return client

    @staticmethod
    def failing_store(error: Exception | None = None) -> MagicMock:
        """Create a CacheStore whose every async method raises (CacheKeyError by default)."""
        store = MagicMock()
        error = error or CacheKeyError("store unavailable")
        store.connect = AsyncMock()
        store.close = AsyncMock()
        store.get = AsyncMock(side_effect=error)
        store.set = AsyncMock(side_effect=error)
        store.expire = AsyncMock(side_effect=error)
        store.reset = AsyncMock(side_effect=error)
        store.ready.return_value = False
        store.keycount.return_value = 0
        store.size.return_value = 0
        return store
