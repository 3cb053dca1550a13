"""
Debug Routes

Read-only HTTP view over the debug registry.

    GET /debug/caches          all registered caches
    GET /debug/caches/{name}   one cache (404 if unknown)

Mount with:
    app.include_router(router)
"""

import structlog
from fastapi import APIRouter, HTTPException, status

from memocache.api.models import CacheInfo, CacheListResponse
from memocache.debug import registry

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/debug", tags=["Debug"])


@router.get("/caches", response_model=CacheListResponse, status_code=status.HTTP_200_OK)
async def list_caches() -> CacheListResponse:
    """Statistics for every registered cache."""
    data = registry.snapshot()
    logger.debug("list_caches", caches=len(data))
    return CacheListResponse(caches={name: CacheInfo(**info) for name, info in data.items()})


@router.get("/caches/{name}", response_model=CacheInfo, status_code=status.HTTP_200_OK)
async def get_cache(name: str) -> CacheInfo:
    """
    Statistics for one registered cache.

    Raises:
        HTTPException: 404 if no cache is registered under the name
    """
    memoizer = registry.registered().get(name)
    if memoizer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown cache: {name}")
    return CacheInfo(**registry.describe(memoizer))
