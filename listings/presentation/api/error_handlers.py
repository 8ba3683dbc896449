"""Map domain exceptions onto JSON responses"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from listings.domain.exceptions import ListingsException, UnauthorizedError
from listings.presentation.middleware.correlation import get_correlation_id
from listings.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


async def listings_exception_handler(request: Request, exc: ListingsException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "[%s] %s %s failed: %s (%s)",
            get_correlation_id(),
            request.method,
            request.url.path,
            exc.message,
            exc.error_code,
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ListingsException, listings_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
