"""
Tests for API error conversion.
"""

import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from truefans.core.error_handling import (
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    handle_api_errors,
)
from truefans.core.exceptions import register_exception_handlers


def _raise(exc):
    @handle_api_errors
    def route():
        raise exc

    return route


@pytest.mark.parametrize(
    "exc, status_code, message",
    [
        (NotFoundError("Pass not found"), 404, "Pass not found"),
        (ConflictError("Already exists"), 409, "Already exists"),
        (AuthorizationError(), 403, "Insufficient permissions"),
        (ExternalServiceError("email", "Failed to send"), 502, "Failed to send"),
        (ValueError("Restaurant not found"), 404, "Restaurant not found"),
        (ValueError("Bad input"), 400, "Bad input"),
        (IntegrityError("INSERT", {}, Exception("duplicate")), 400, "Database constraint violation"),
        (OperationalError("SELECT", {}, Exception("gone")), 503, "Database service temporarily unavailable"),
        (RuntimeError("boom"), 500, "An unexpected error occurred"),
    ],
)
def test_sync_errors_become_http_exceptions(exc, status_code, message):
    with pytest.raises(HTTPException) as exc_info:
        _raise(exc)()

    assert exc_info.value.status_code == status_code
    assert exc_info.value.detail["message"] == message


def test_external_service_names_the_service():
    with pytest.raises(HTTPException) as exc_info:
        _raise(ExternalServiceError("passninja", "Wallet provider timed out"))()

    assert exc_info.value.detail["details"] == {"service": "passninja"}


def test_http_exception_passes_through():
    with pytest.raises(HTTPException) as exc_info:
        _raise(HTTPException(status_code=418, detail="teapot"))()

    assert exc_info.value.status_code == 418
    assert exc_info.value.detail == "teapot"


@pytest.mark.asyncio
async def test_async_routes_are_wrapped():
    @handle_api_errors
    async def route():
        raise NotFoundError("Digital pass not found")

    with pytest.raises(HTTPException) as exc_info:
        await route()

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_async_return_value_is_preserved():
    @handle_api_errors
    async def route():
        return {"success": True}

    assert await route() == {"success": True}


def test_dependency_errors_use_registered_handlers():
    app = FastAPI()
    register_exception_handlers(app)

    def staff_only():
        raise AuthorizationError("Only restaurant staff can validate passes")

    @app.get("/guarded")
    def guarded(_=Depends(staff_only)):
        return {}

    response = TestClient(app).get("/guarded")

    assert response.status_code == 403
    assert response.json() == {
        "detail": {"message": "Only restaurant staff can validate passes", "details": {}},
        "path": "/guarded",
    }
