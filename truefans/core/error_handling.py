# truefans/core/error_handling.py

"""
Error handling utilities for API routes.
"""

from typing import Callable, Dict, Any, Optional
from functools import wraps
import logging
import inspect
import traceback

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, OperationalError
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message, status_code=status.HTTP_409_CONFLICT, details=details
        )


class APIValidationError(APIError):
    """Input validation error - named to avoid the Pydantic collision"""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"validation_errors": errors} if errors else {},
        )


class AuthorizationError(APIError):
    """Authorization error"""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN)


class ExternalServiceError(APIError):
    """A downstream service (SMTP relay, wallet provider) failed"""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"service": service},
        )


def handle_api_errors(func: Callable) -> Callable:
    """
    Decorator to handle common API errors with proper status codes and messages.
    Handles both async and sync route functions.

    Usage:
        @router.get("/{pass_id}")
        @handle_api_errors
        async def get_pass(pass_id: str, db: Session = Depends(get_db)):
            ...
    """

    def handle_exception(e: Exception, func_name: str) -> None:
        if isinstance(e, APIError):
            logger.warning(
                f"API Error in {func_name}: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            raise HTTPException(
                status_code=e.status_code,
                detail={"message": e.message, "details": e.details},
            )

        elif isinstance(e, HTTPException):
            raise e

        elif isinstance(e, ValueError) and not isinstance(e, ValidationError):
            logger.warning(f"Validation error in {func_name}: {str(e)}")

            if "not found" in str(e).lower():
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND, detail={"message": str(e)}
                )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail={"message": str(e)}
            )

        elif isinstance(e, IntegrityError):
            logger.error(f"Database integrity error in {func_name}: {str(e.orig)}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "message": "Database constraint violation",
                    "type": "integrity_error",
                },
            )

        elif isinstance(e, OperationalError):
            logger.error(f"Database operational error in {func_name}: {str(e.orig)}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "message": "Database service temporarily unavailable",
                    "type": "operational_error",
                },
            )

        elif isinstance(e, ValidationError):
            logger.warning(f"Pydantic validation error in {func_name}: {e.errors()}")
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Request validation failed", "errors": e.errors()},
            )

        else:
            logger.error(
                f"Unexpected error in {func_name}: {str(e)}\n{traceback.format_exc()}"
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"message": "An unexpected error occurred"},
            )

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                handle_exception(e, func.__name__)

        return async_wrapper
    else:

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handle_exception(e, func.__name__)

        return sync_wrapper
