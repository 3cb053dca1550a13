"""
Configuration Module

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **options.py**: Per-instance Memoizer options (CacheOptions, ResetOptions, RedisOptions)
- **constants.py**: Defaults, log stages and backend enum

Usage:
------
```python
from memocache.core.config import CacheOptions, get_settings

settings = get_settings()
options = CacheOptions.from_settings(settings)
```

Testing:
-------
```python
import os
from memocache.core.config import reload_settings

os.environ["MEMO_MAX"] = "10"
settings = reload_settings()
assert settings.cache.MEMO_MAX == 10
```
"""

from memocache.core.config.constants import (
    KEY_FINGERPRINT_DEPTH,
    LRU_DEFAULT_MAX_ENTRIES,
    REDIS_DEFAULT_MAX_AGE,
    REDIS_KEY_PREFIX,
    Stage,
    StoreBackend,
)
from memocache.core.config.options import CacheOptions, RedisOptions, ResetOptions
from memocache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Options
    "CacheOptions",
    "RedisOptions",
    "ResetOptions",
    # Enums
    "Stage",
    "StoreBackend",
    # Defaults
    "KEY_FINGERPRINT_DEPTH",
    "LRU_DEFAULT_MAX_ENTRIES",
    "REDIS_DEFAULT_MAX_AGE",
    "REDIS_KEY_PREFIX",
]
