"""
Pending Registry

Tracks keys whose underlying operation is in flight, together with the
callers waiting for the result.

Guarantees:
    - At most one in-flight computation per key: the presence of a key is
      the exclusion mechanism. open() checks and creates in one synchronous
      step, so under a single event loop no two callers can both observe
      an absent key.
    - Waiters are kept in arrival order and handed out exactly once by drain().
"""

from collections.abc import Callable
from typing import Any

from memocache.memoizer.stats import CacheStats

Completion = Callable[[BaseException | None, Any], None]


class PendingRegistry:
    """Mapping of cache key to the ordered list of waiting completions."""

    def __init__(self, stats: CacheStats):
        self._waiters: dict[str, list[Completion]] = {}
        self._stats = stats

    def open(self, key: str) -> bool:
        """
        Mark a key as in flight.

        Returns:
            True if the caller created the entry and must run the operation,
            False if a computation for the key is already running
        """
        if key in self._waiters:
            return False
        self._waiters[key] = []
        self._stats.open_pending()
        return True

    def enqueue(self, key: str, callback: Completion) -> None:
        """Append a waiter to an open entry."""
        self._waiters[key].append(callback)

    def drain(self, key: str) -> list[Completion]:
        """
        Close the entry for a key.

        Returns:
            The queued waiters, in arrival order
        """
        waiters = self._waiters.pop(key, None)
        if waiters is None:
            return []
        self._stats.close_pending()
        return waiters

    def waiting(self, key: str) -> int:
        """Number of queued waiters for a key (the original caller excluded)."""
        return len(self._waiters.get(key, ()))

    def keys(self) -> list[str]:
        return list(self._waiters)

    def __contains__(self, key: str) -> bool:
        return key in self._waiters

    def __len__(self) -> int:
        return len(self._waiters)
