"""FastAPI application factory and main app.

This module creates the FastAPI application with the webhook and health
routers, request logging, and plain-text 404 responses for anything else.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lane_notifier import __version__
from lane_notifier.config import get_settings
from web.routers import health, notify

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Logs the service endpoints on startup.
    """
    settings = get_settings()
    base = f"http://localhost:{settings.port}"
    logger.info("Starting Lane notification server on port %d", settings.port)
    logger.info("Webhook URL: %s/notify", base)
    logger.info("Health check: %s/health", base)
    yield
    logger.info("Shutting down gracefully...")


async def not_found_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answer unmatched routes and methods with a plain-text 404."""
    if exc.status_code in (404, 405):
        return PlainTextResponse(f"Not found: {request.url.path}", status_code=404)
    return await http_exception_handler(request, exc)


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log every request line and the resulting status."""
    logger.info("Incoming request: %s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info("Response status: %d", response.status_code)
    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    application = FastAPI(
        title="Lane Notifier API",
        description="Registry push webhook driving Lane build, export "
        "and artifact upload",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_exception_handler(StarletteHTTPException, not_found_handler)
    application.middleware("http")(log_requests)

    # Include routers
    application.include_router(health.router, tags=["health"])
    application.include_router(notify.router, tags=["notify"])

    return application


# Create the default application instance
app = create_app()
