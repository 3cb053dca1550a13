"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from memocache.core.config.options import CacheOptions, RedisOptions  # noqa: E402
from memocache.debug import registry  # noqa: E402
from memocache.infrastructure.cache.lru_store import LRUStore  # noqa: E402
from memocache.infrastructure.cache.redis_store import RedisStore  # noqa: E402
from memocache.memoizer.memoizer import Memoizer  # noqa: E402
from tests.test_fixtures.store_factory import FakeClock  # noqa: E402

# ============================================================================
# Environment Isolation
# ============================================================================

MEMO_ENV_VARS = (
    "MEMO_BACKEND",
    "MEMO_MAX",
    "MEMO_MAX_SIZE",
    "MEMO_MAX_AGE",
    "MEMO_QUEUE_ENABLED",
    "MEMO_CACHE_ID",
    "MEMO_RESET_INTERVAL",
    "MEMO_RESET_FIRST_IN",
    "REDIS_URL",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_DB",
    "REDIS_PROXY_COMPAT",
    "REDIS_CONNECT_TIMEOUT",
    "REDIS_CONNECT_RETRIES",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every memocache environment variable for the test."""
    for name in MEMO_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


@pytest.fixture(autouse=True)
def reset_debug_registry():
    """Keep the process-wide debug registry empty between tests."""
    registry.clear_registry()
    yield
    registry.clear_registry()


# ============================================================================
# Clock Fixtures
# ============================================================================


@pytest.fixture
def fake_clock():
    """Manually advanced clock starting at epoch second 1000."""
    return FakeClock(start=1000.0)


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def lru_store(fake_clock):
    """LRU store holding at most three entries."""
    return LRUStore(max_entries=3, clock=fake_clock)


@pytest.fixture
def mock_redis_client():
    """
    Mock redis.asyncio client.

    Every command is an AsyncMock; GET misses by default.
    """
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.dbsize = AsyncMock(return_value=0)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.flushdb = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


@pytest_asyncio.fixture
async def redis_store(mock_redis_client):
    """Connected RedisStore (cache id 7, ttl 300s) over a mock client."""
    store = RedisStore(RedisOptions(), cache_id=7, max_age=300, client=mock_redis_client)
    await store.connect()
    return store


# ============================================================================
# Memoizer Fixtures
# ============================================================================


@pytest.fixture
def memoizer():
    """Memoizer over a default in-memory store."""
    return Memoizer(CacheOptions(max=100))


@pytest.fixture
def unqueued_memoizer():
    """Memoizer with request coalescing disabled."""
    return Memoizer(CacheOptions(max=100, queue_enabled=False))
