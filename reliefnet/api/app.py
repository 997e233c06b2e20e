"""
FastAPI application factory.

* Registers routes for panic alerts, issues, volunteers and admin.
* Disposes the DB connection pool on shutdown via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from reliefnet.api.middleware import limiter
from reliefnet.api.routes import admin, issues, panic, volunteers
from reliefnet.config import settings
from reliefnet.infrastructure.database import dispose_engine
from reliefnet.infrastructure.redis_client import close_redis

logging.basicConfig(level=settings.log_level.upper())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "ReliefNet API starting (panic radius=%.0f km, guarded box=%s)",
        settings.panic_search_radius_km,
        settings.guarded_bounding_box,
    )
    yield
    await close_redis()
    await dispose_engine()
    logger.info("ReliefNet API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="ReliefNet API",
        description=(
            "Disaster response and volunteer coordination.  Citizens raise "
            "panic alerts or report incidents; the nearest available, "
            "verified volunteers are located by great-circle distance and "
            "can accept, work and resolve the issue."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(panic.router, prefix="/api/v1")
    app.include_router(issues.router, prefix="/api/v1")
    app.include_router(volunteers.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
