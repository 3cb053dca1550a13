"""
Debug Application

Standalone FastAPI application serving the debug routes. Registered
memoizers are connected on startup and closed on shutdown.

Usage:
    register(Memoizer(options), "users")
    app = create_app()
    # uvicorn memocache.api.app:create_app --factory
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from memocache.api.debug_routes import router as debug_router
from memocache.core.config.settings import get_settings
from memocache.core.exceptions import CacheError, MemoCacheError
from memocache.core.logging.logger import get_logger, setup_logging
from memocache.debug import registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect registered memoizers on startup, close them on shutdown."""
    settings = get_settings()
    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    for name, memoizer in registry.registered().items():
        try:
            await memoizer.initialize()
        except CacheError as e:
            # The memoizer keeps working, every lookup is a miss
            logger.warning("Cache store unavailable", name=name, error=str(e))

    yield

    for memoizer in registry.registered().values():
        await memoizer.shutdown()


def create_app() -> FastAPI:
    """
    Create and configure the debug application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="memocache",
        description="Inspection of registered memoizers",
        lifespan=lifespan,
    )
    app.include_router(debug_router)

    @app.exception_handler(MemoCacheError)
    async def memocache_exception_handler(request: Request, exc: MemoCacheError):
        """Handle memocache exceptions."""
        logger.error(f"memocache exception: {exc.message}", error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content=exc.to_dict())

    return app
