"""
memocache

Memoization for asynchronous callables with request coalescing, lazy
scheduled resets and pluggable storage (in-memory LRU or Redis).

Usage:
    from memocache import CacheOptions, Memoizer

    memo = Memoizer(CacheOptions(max=1000))
    get_user = memo.wrap(fetch_user)

    user = await get_user(42)
    print(memo.stats)
"""

from memocache.core.config import CacheOptions, RedisOptions, ResetOptions
from memocache.core.exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    CacheResetError,
    ConfigurationError,
    InvalidCachedOperationError,
    MemoCacheError,
    ValidationError,
)
from memocache.debug import register
from memocache.memoizer import CachedOperation, CacheStats, Memoizer, create_memoizer

__version__ = "1.0.0"

__all__ = [
    "CacheConnectionError",
    "CacheError",
    "CacheKeyError",
    "CacheOptions",
    "CacheResetError",
    "CacheStats",
    "CachedOperation",
    "ConfigurationError",
    "InvalidCachedOperationError",
    "MemoCacheError",
    "Memoizer",
    "RedisOptions",
    "ResetOptions",
    "ValidationError",
    "create_memoizer",
    "register",
]
