"""
Integration Tests for the Redis-backed Memoizer

Run against a real server with:
    USE_REAL_REDIS=1 REDIS_URL=redis://localhost:6379 pytest -m integration
"""

import asyncio
import os

import pytest
import pytest_asyncio

from memocache.core.config.options import CacheOptions, RedisOptions
from memocache.memoizer.memoizer import Memoizer

# Database 15 is flushed by these tests
CACHE_ID = 15


@pytest_asyncio.fixture
async def redis_memoizer(use_real_redis):
    if not use_real_redis:
        pytest.skip("USE_REAL_REDIS not set")

    redis = RedisOptions(url=os.getenv("REDIS_URL"))
    memo = Memoizer(CacheOptions(id=CACHE_ID, max_age=30, redis=redis))
    await memo.initialize()
    await memo.store.reset()
    yield memo
    await memo.store.reset()
    await memo.shutdown()


@pytest.mark.integration
class TestRedisMemoizer:
    """Memoizer behavior over a live Redis server."""

    @pytest.mark.asyncio
    async def test_second_call_hits(self, redis_memoizer):
        calls = []

        async def fetch(user_id):
            calls.append(user_id)
            return {"id": user_id}

        cached = redis_memoizer.wrap(fetch)

        assert await cached(1) == {"id": 1}
        # Writes are not awaited by the caller
        await asyncio.sleep(0.05)
        assert await cached(1) == {"id": 1}

        assert calls == [1]
        assert redis_memoizer.stats.hit == 1

    @pytest.mark.asyncio
    async def test_warmup_and_invalidate(self, redis_memoizer):
        async def fetch(user_id):
            return {"id": user_id}

        cached = redis_memoizer.wrap(fetch)

        assert await redis_memoizer.warmup(cached, 2, {"id": 2, "warmed": True}) is True
        assert await cached(2) == {"id": 2, "warmed": True}
        assert await redis_memoizer.invalidate(cached, 2) is True
        assert await cached(2) == {"id": 2}
        assert redis_memoizer.stats.miss == 1
