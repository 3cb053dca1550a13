"""
Debug API Response Models

Pydantic models describing the /debug/caches responses.
"""

from pydantic import BaseModel, Field


class CacheStatsModel(BaseModel):
    """Memoizer counters."""

    hit: int = Field(ge=0, description="Calls answered from the store")
    miss: int = Field(ge=0, description="Executions of the underlying operation")
    reset: int = Field(ge=0, description="Scheduled full-store resets")
    pending: int = Field(ge=0, description="Keys with a computation in flight")


class CacheInfo(BaseModel):
    """Inspection data for one registered cache."""

    stats: CacheStatsModel
    hit_rate: float = Field(ge=0.0, le=1.0)
    keycount: int = Field(description="Stored keys, -1 when unknown")
    size: int = Field(ge=0, description="Aggregate size of stored values")
    ready: bool
    pending_keys: int = Field(ge=0)
    store: str = Field(description="Store implementation")


class CacheListResponse(BaseModel):
    """All registered caches."""

    caches: dict[str, CacheInfo]
