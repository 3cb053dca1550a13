"""
Cache Store Module

Storage backends for the memoizer (in-memory LRU, Redis).
"""

from .factory import CacheStoreFactory, create_store
from .lru_store import LRUStore
from .redis_store import RedisStore

__all__ = [
    "CacheStoreFactory",
    "LRUStore",
    "RedisStore",
    "create_store",
]
