"""
Bearer token authentication for the pass endpoints.

Tokens are issued by the platform's identity provider; this module only
verifies them and exposes the authenticated identity to the routes.
"""

from datetime import datetime, timedelta
from typing import Optional, List
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from .config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = 30

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Token payload data."""

    user_id: str
    email: Optional[str] = None
    roles: List[str] = []
    restaurant_id: Optional[str] = None


class User(BaseModel):
    """Authenticated user as seen by the routes."""

    id: str
    email: Optional[str] = None
    roles: List[str] = []
    restaurant_id: Optional[str] = None


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(
        to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def verify_token(token: str) -> Optional[TokenData]:
    """
    Verify and decode a JWT access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: got {payload.get('type')}")
        return None

    sub = payload.get("sub")
    if sub is None:
        return None

    return TokenData(
        user_id=str(sub),
        email=payload.get("email"),
        roles=payload.get("roles", []),
        restaurant_id=payload.get("restaurant_id"),
    )


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """Resolve the authenticated user from the bearer token."""
    if credentials is None:
        raise _credentials_exception()

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise _credentials_exception()

    return User(
        id=token_data.user_id,
        email=token_data.email,
        roles=token_data.roles,
        restaurant_id=token_data.restaurant_id,
    )
