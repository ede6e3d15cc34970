"""Router modules for FastAPI web API."""

from web.routers import health, notify

__all__ = ["health", "notify"]
