from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.infrastructure.cache import CacheService
from listings.infrastructure.config.settings import Settings, get_settings
from listings.infrastructure.persistence.database import get_db
from listings.presentation.api.dependencies import get_cache_service

router = APIRouter()


@router.get("/health")
async def health_check(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheService, Depends(get_cache_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Health check endpoint for load balancers and monitoring.

    Returns 200 when the database answers, 503 otherwise. The cache is
    reported but optional.
    """
    checks: dict[str, Any] = {
        "api": True,
        "database": False,
        "cache": cache.is_available() if settings.redis_enabled else None,
    }

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except SQLAlchemyError as e:
        checks["error"] = str(e)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})

    return {"status": "healthy", "checks": checks}
