# truefans/modules/digital_passes/dependencies.py

from typing import AsyncIterator

from fastapi import Depends

from truefans.core.auth import User, get_current_user
from truefans.core.error_handling import AuthorizationError
from .services.pass_email_service import DigitalPassEmailService
from .services.wallet_provider import PassNinjaClient


def get_pass_email_service() -> DigitalPassEmailService:
    return DigitalPassEmailService()


async def get_wallet_client() -> AsyncIterator[PassNinjaClient]:
    client = PassNinjaClient()
    try:
        yield client
    finally:
        await client.aclose()


async def get_restaurant_staff(current_user: User = Depends(get_current_user)) -> User:
    """Authenticated user who works at a restaurant"""
    if not current_user.restaurant_id:
        raise AuthorizationError("Only restaurant staff can validate passes")
    return current_user
