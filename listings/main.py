from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listings.infrastructure.cache import CacheService
from listings.infrastructure.config.settings import get_settings
from listings.infrastructure.persistence.database import get_engine
from listings.presentation.api.dependencies import get_cache_service, set_cache_service
from listings.presentation.api.error_handlers import register_exception_handlers
from listings.presentation.api.v1.routes import (activities, auth, bookings,
                                                 gaming_zones, health, messes,
                                                 properties, subadmins)
from listings.presentation.middleware import CorrelationIDMiddleware, TimeoutMiddleware
from listings.presentation.rate_limit import limiter
from listings.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    settings = get_settings()
    setup_logging()

    # Database schema is created by scripts/create_admin.py or migrations

    if settings.redis_enabled:
        cache_service = CacheService()
        await cache_service.connect()
        set_cache_service(cache_service)
        if cache_service.is_available():
            logger.info("Redis cache initialized successfully")
    else:
        logger.info("Redis cache disabled in configuration")

    yield

    if settings.redis_enabled:
        cache = await get_cache_service()
        await cache.disconnect()

    await get_engine().dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Configure rate limiter
    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    register_exception_handlers(app)

    # Middleware (applied in reverse order)
    app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    prefix = settings.api_prefix
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["authentication"])
    app.include_router(subadmins.router, prefix=f"{prefix}/admin/subadmins", tags=["subadmins"])
    app.include_router(properties.router, prefix=f"{prefix}/properties", tags=["properties"])
    app.include_router(messes.router, prefix=f"{prefix}/messes", tags=["messes"])
    app.include_router(
        gaming_zones.router, prefix=f"{prefix}/gaming-zones", tags=["gaming-zones"]
    )
    app.include_router(bookings.router, prefix=f"{prefix}/bookings", tags=["bookings"])
    app.include_router(activities.router, prefix=f"{prefix}/activities", tags=["activities"])
    app.include_router(health.router, tags=["health"])

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    return app


app = create_app()
