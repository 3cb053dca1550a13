"""
Exception Module

Structured exception hierarchy for memocache.

Module Structure:
-----------------
- **base.py**: MemoCacheError base class + ConfigurationError
- **cache.py**: Storage backend exceptions (Redis, in-memory)
- **validation.py**: Invalid arguments to administrative operations

Usage:
------
```python
from memocache.core.exceptions import CacheError, InvalidCachedOperationError
```
"""

from memocache.core.exceptions.base import ConfigurationError, MemoCacheError
from memocache.core.exceptions.cache import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    CacheResetError,
)
from memocache.core.exceptions.validation import InvalidCachedOperationError, ValidationError

__all__ = [
    # Base
    "MemoCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "CacheResetError",
    # Validation
    "ValidationError",
    "InvalidCachedOperationError",
]
