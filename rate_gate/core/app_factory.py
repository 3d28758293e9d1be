from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, lifespan, middleware, handlers,
routers) so tests can build isolated instances.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rate_gate.api.routes import admin_router, health_router, people_router
from rate_gate.core.config import settings
from rate_gate.core.exception_handlers import setup_exception_handlers
from rate_gate.core.logging import configure_logging
from rate_gate.core.middleware import request_id_middleware
from rate_gate.core.rate_limit import close_rate_limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the shared limiter's store connection on shutdown."""
    logger.info(
        "app.startup",
        extra={
            "app_env": settings.app_env,
            "store_backend": settings.store.backend,
            "rate_limit_requests": settings.app.rate_limit_requests,
        },
    )
    yield
    await close_rate_limiter()
    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Rate Gate",
        description=(
            "HTTP gateway limiting each client IP to a fixed number of requests "
            "per recurring time window, with counters shared through Redis."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(people_router)
    app.include_router(admin_router)
    app.include_router(health_router)

    return app
