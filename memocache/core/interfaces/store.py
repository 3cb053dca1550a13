"""
Cache Store Protocol

This module defines the protocol every storage backend used by the Memoizer
must satisfy.

Architectural Decision: Protocol-based abstraction
- Enables multiple backends (in-memory LRU, Redis)
- Facilitates testing with mock implementations
- Type-safe interface with runtime checking
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """
    Protocol defining the key/value store used by the Memoizer.

    Implementations:
    - LRUStore: bounded in-process cache
    - RedisStore: remote cache shared between instances

    All data operations are coroutines. Backend failures are raised as
    CacheError subclasses; the Memoizer never lets them reach callers.
    """

    async def connect(self) -> None:
        """
        Establish connection to the backend (no-op for in-process stores).

        Raises:
            CacheConnectionError: If connection fails
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...

    async def get(self, key: str) -> tuple[Any, bool]:
        """
        Get value from the store.

        Args:
            key: Cache key

        Returns:
            (value, present). present is False when the key is absent, so a
            stored None is distinguishable from a miss.

        Raises:
            CacheError: If the backend fails
        """
        ...

    async def set(self, key: str, value: Any) -> None:
        """
        Store a value. TTL and eviction are defined by the backend.

        Raises:
            CacheError: If the backend fails
        """
        ...

    async def expire(self, key: str) -> None:
        """
        Remove a single key.

        Raises:
            CacheError: If the backend fails
        """
        ...

    async def reset(self) -> None:
        """
        Remove every key.

        Raises:
            CacheResetError: If the deployment mode does not support it
        """
        ...

    def ready(self) -> bool:
        """Backend connectivity/health signal."""
        ...

    def keycount(self) -> int:
        """Number of stored keys (-1 when unknown)."""
        ...

    def size(self) -> int:
        """Aggregate size of stored values (0 when not tracked)."""
        ...
