"""
Cache-Related Exceptions

Failures of a storage backend (Redis or in-memory). The memoizer treats all
of them as non-fatal: a failed read is a miss, a failed write is ignored.
"""

from memocache.core.exceptions.base import MemoCacheError


class CacheError(MemoCacheError):
    """Base exception for storage backend errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when unable to connect to the cache (Redis).

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Incorrect host/port/url configuration
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a single-key operation fails.

    Common causes:
    - Value cannot be serialized or deserialized
    - Operation timeout
    - Command rejected by the server
    """
    pass


class CacheResetError(CacheError):
    """Raised when the store cannot be cleared (e.g. twemproxy compatibility mode)."""
    pass
