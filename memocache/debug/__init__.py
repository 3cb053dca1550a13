"""
Debug Module

Registration and inspection of Memoizers.
"""

from .registry import (
    clear_registry,
    describe,
    log_stats,
    register,
    registered,
    snapshot,
    unregister,
)

__all__ = [
    "clear_registry",
    "describe",
    "log_stats",
    "register",
    "registered",
    "snapshot",
    "unregister",
]
