"""
Validation Exceptions

Raised synchronously to callers of the administrative operations.
"""

from memocache.core.exceptions.base import MemoCacheError


class ValidationError(MemoCacheError):
    """Base exception for invalid arguments."""
    pass


class InvalidCachedOperationError(ValidationError):
    """Raised when warmup/invalidate receive something that is not a cached operation."""
    pass
