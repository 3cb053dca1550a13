"""
Core Interfaces

Protocols implemented by the storage backends.
"""

from memocache.core.interfaces.store import CacheStore

__all__ = ["CacheStore"]
