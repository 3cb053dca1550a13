"""
Memoizer Module

Cache-aware wrapping of asynchronous callables with request coalescing.
"""

from .cached_operation import CachedOperation
from .keygen import derive_key, filter_args, fingerprint
from .memoizer import Memoizer, create_memoizer
from .pending import PendingRegistry
from .reset_scheduler import ResetScheduler
from .stats import CacheStats

__all__ = [
    "CacheStats",
    "CachedOperation",
    "Memoizer",
    "PendingRegistry",
    "ResetScheduler",
    "create_memoizer",
    "derive_key",
    "filter_args",
    "fingerprint",
]
