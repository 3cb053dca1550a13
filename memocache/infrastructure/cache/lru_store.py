"""
In-Memory LRU Store

Bounded in-process storage for memoized results.

Bounds (one of):
    - max: maximum number of entries
    - max_size: maximum aggregate size, where the size of an entry is the
      length of its JSON encoding

Entries optionally expire after max_age seconds. A dispose callback is
invoked with (key, value) whenever an entry leaves the store through
eviction, expiry, expire() or reset(). Errors raised by the callback are
logged at LRU.DISPOSE; the entry is removed regardless.
"""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson

from memocache.core.config.constants import LRU_DEFAULT_MAX_ENTRIES, Stage
from memocache.core.exceptions import CacheKeyError
from memocache.core.logging.logger import get_logger, log_stage, preview_key

logger = get_logger(__name__)


@dataclass
class _Entry:
    value: Any
    size: int
    expires_at: float | None


class LRUStore:
    """
    In-memory LRU cache storage.

    This is a per-instance cache, not shared across workers.
    For distributed caching, use RedisStore.

    Implementation Details:
    - Uses OrderedDict for O(1) access and LRU ordering
    - Guarded by asyncio.Lock
    - Evicts least recently used items when a bound is exceeded
    - Expired entries are dropped lazily on access
    """

    def __init__(
        self,
        max_entries: int | None = None,
        max_size: int | None = None,
        max_age: float | None = None,
        dispose: Callable[[str, Any], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize LRU cache.

        Args:
            max_entries: Maximum number of items (default 1000 unless max_size is set)
            max_size: Maximum aggregate size of the stored values
            max_age: Entry TTL in seconds (None = no expiry)
            dispose: Called with (key, value) when an entry is removed
            clock: Monotonic time source
        """
        if max_size is None and max_entries is None:
            max_entries = LRU_DEFAULT_MAX_ENTRIES

        self._max_entries = max_entries if max_size is None else None
        self._max_size = max_size
        self._max_age = max_age
        self._dispose = dispose
        self._clock = clock
        self._cache: OrderedDict[str, _Entry] = OrderedDict()
        self._total_size = 0
        self._lock = asyncio.Lock()

    @classmethod
    def from_options(cls, options) -> "LRUStore":
        """Build a store from CacheOptions."""
        return cls(
            max_entries=options.max,
            max_size=options.max_size,
            max_age=options.max_age,
            dispose=options.dispose,
        )

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def get(self, key: str) -> tuple[Any, bool]:
        """
        Get value from cache.

        LRU Update: Moves accessed item to end (most recently used)

        Returns:
            (value, present)
        """
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None, False

            if self._is_expired(entry):
                self._remove(key)
                return None, False

            self._cache.move_to_end(key)
            return entry.value, True

    async def set(self, key: str, value: Any) -> None:
        """
        Set value in cache. Evicts LRU items while over a bound.

        An entry larger than max_size is not stored.

        Raises:
            CacheKeyError: If the value cannot be sized (max_size mode only)
        """
        size = self._size_of(key, value)

        async with self._lock:
            if self._max_size is not None and size > self._max_size:
                log_stage(
                    logger, Stage.LRU_SKIP, "Entry larger than max_size not stored",
                    level="debug", cache_key=preview_key(key), size=size,
                )
                return

            if key in self._cache:
                self._remove(key, dispose=False)

            expires_at = self._clock() + self._max_age if self._max_age else None
            self._cache[key] = _Entry(value=value, size=size, expires_at=expires_at)
            self._total_size += size

            while self._over_capacity():
                oldest_key = next(iter(self._cache))
                log_stage(
                    logger, Stage.LRU_EVICT, "Evicting least recently used entry",
                    level="debug", cache_key=preview_key(oldest_key),
                )
                self._remove(oldest_key)

    async def expire(self, key: str) -> None:
        """Delete value from cache."""
        async with self._lock:
            if key in self._cache:
                self._remove(key)

    async def reset(self) -> None:
        """Clear all items from cache."""
        async with self._lock:
            for key in list(self._cache):
                self._remove(key)

    def ready(self) -> bool:
        return True

    def keycount(self) -> int:
        """Get current number of items in cache."""
        return len(self._cache)

    def size(self) -> int:
        """Aggregate size when bounded by size, otherwise the item count."""
        if self._max_size is not None:
            return self._total_size
        return len(self._cache)

    def values(self) -> list[Any]:
        """Stored values, least recently used first."""
        return [entry.value for entry in self._cache.values()]

    def keys(self) -> list[str]:
        """Stored keys, least recently used first."""
        return list(self._cache.keys())

    # -------------------------------------------------------------------------
    # Internals (caller holds the lock)
    # -------------------------------------------------------------------------

    def _size_of(self, key: str, value: Any) -> int:
        if self._max_size is None:
            return 1
        try:
            return len(orjson.dumps(value))
        except TypeError as e:
            raise CacheKeyError(
                message=f"Cannot compute size of value: {e}", details={"key": key}
            )

    def _is_expired(self, entry: _Entry) -> bool:
        return entry.expires_at is not None and self._clock() >= entry.expires_at

    def _over_capacity(self) -> bool:
        if self._max_size is not None:
            return self._total_size > self._max_size
        return len(self._cache) > self._max_entries

    def _remove(self, key: str, dispose: bool = True) -> None:
        entry = self._cache.pop(key)
        self._total_size -= entry.size
        if dispose and self._dispose is not None:
            try:
                self._dispose(key, entry.value)
            except Exception as e:
                log_stage(
                    logger, Stage.LRU_DISPOSE, "Dispose callback failed", level="warning",
                    cache_key=preview_key(key), error=str(e),
                )
