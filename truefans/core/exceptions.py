"""
Exception handlers for consistent API error responses.

Routes wrapped in ``handle_api_errors`` convert domain errors themselves;
these handlers cover errors raised elsewhere, such as in dependencies.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
import logging

from .error_handling import APIError

logger = logging.getLogger(__name__)


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {"message": str(exc)},
            "path": str(request.url.path),
        },
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle domain API errors"""
    logger.warning(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": {"message": exc.message, "details": exc.details},
            "path": str(request.url.path),
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(APIError, handle_api_error)
