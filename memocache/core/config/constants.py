"""
System Constants and Enumerations

This module defines the constants and enumerations shared by the memoizer,
the storage backends and the debug registry.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for defaults and magic numbers
- Type-safe enums for backend selection and log stages
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Processing stages used as the ``stage`` field of log entries.

    Format: {PREFIX}.{STEP}
    - MEMO: memoizer call path
    - LRU: in-memory store
    - REDIS: remote store
    - DEBUG: debug registry
    """

    WRAP = "MEMO.WRAP"
    RESET = "MEMO.RESET"
    LOOKUP = "MEMO.LOOKUP"
    HIT = "MEMO.HIT"
    MISS = "MEMO.MISS"
    QUEUED = "MEMO.QUEUED"
    STORE = "MEMO.STORE"
    FAN_OUT = "MEMO.FAN_OUT"
    BACKEND_ERROR = "MEMO.BACKEND_ERROR"
    WARMUP = "MEMO.WARMUP"
    INVALIDATE = "MEMO.INVALIDATE"

    LRU_EVICT = "LRU.EVICT"
    LRU_SKIP = "LRU.SKIP"
    LRU_DISPOSE = "LRU.DISPOSE"

    REDIS_INIT = "REDIS.INIT"
    REDIS_CONNECT = "REDIS.CONNECT"
    REDIS_CLOSE = "REDIS.CLOSE"
    REDIS_RETRY = "REDIS.RETRY"
    REDIS_GET = "REDIS.GET"
    REDIS_SET = "REDIS.SET"
    REDIS_EXPIRE = "REDIS.EXPIRE"
    REDIS_RESET = "REDIS.RESET"

    DEBUG_REGISTER = "DEBUG.REGISTER"
    DEBUG_STATS = "DEBUG.STATS"


# ============================================================================
# Storage Backends
# ============================================================================


class StoreBackend(str, Enum):
    """
    Storage backend selection.

    LRU: In-process bounded cache (per instance, not shared)
    REDIS: Remote cache shared by every instance using the same cache id
    """

    LRU = "lru"
    REDIS = "redis"


# ============================================================================
# Key Derivation
# ============================================================================

KEY_FINGERPRINT_DEPTH = 8  # Values nested deeper than this are opaque leaves
ANONYMOUS_FUNCTION_NAME = "_"  # Name used when the wrapped callable has none

# ============================================================================
# In-Memory Store
# ============================================================================

LRU_DEFAULT_MAX_ENTRIES = 1000  # Entry bound when neither max nor max_size is set

# ============================================================================
# Redis Store
# ============================================================================

REDIS_KEY_PREFIX = "memo"  # Keys are stored as memo:<cache_id>:<key>
REDIS_DEFAULT_HOST = "localhost"
REDIS_DEFAULT_PORT = 6379
REDIS_DEFAULT_CONNECT_TIMEOUT = 5.0  # Seconds
REDIS_DEFAULT_CONNECT_RETRIES = 3  # Attempts, including the first
REDIS_RETRY_BASE_DELAY = 0.1  # Seconds, first backoff between connection attempts
REDIS_RETRY_MAX_DELAY = 2.0  # Seconds
REDIS_DEFAULT_MAX_AGE = 60  # Seconds, TTL when max_age is not configured

# ============================================================================
# Logging
# ============================================================================

LOG_KEY_PREVIEW_LENGTH = 20  # Cache keys are truncated in log entries
