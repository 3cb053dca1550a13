"""
Debug HTTP API

FastAPI router and application exposing registered caches.
"""

from .app import create_app
from .debug_routes import router

__all__ = ["create_app", "router"]
