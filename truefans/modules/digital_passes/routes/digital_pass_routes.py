# truefans/modules/digital_passes/routes/digital_pass_routes.py

"""
Wallet pass routes used by the diner app and restaurant staff.

Responses use the ``{success, data}`` envelope.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from truefans.core.database import get_db
from truefans.core.auth import User, get_current_user
from truefans.core.error_handling import handle_api_errors

from ..dependencies import get_restaurant_staff, get_wallet_client
from ..services.pass_service import DigitalPassService
from ..services.wallet_provider import PassNinjaClient
from ..schemas.pass_schemas import (
    DinerPassGenerateRequest,
    PassDownloadResponse,
    DigitalPassResponse,
    DigitalPassEnvelope,
    DigitalPassListEnvelope,
    PassCountersUpdate,
    PassValidateRequest,
    PassValidationResult,
    PassValidationEnvelope,
)

router = APIRouter(prefix="/api/v1/digital-pass", tags=["Digital Pass"])


@router.post("/generate", response_model=PassDownloadResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def generate_digital_pass(
    request: DinerPassGenerateRequest,
    db: Session = Depends(get_db),
    wallet_client: PassNinjaClient = Depends(get_wallet_client),
):
    """
    Issue a wallet pass to a diner. No authentication required.

    Raises:
        404: Restaurant not found
        502: Wallet provider failed
    """
    service = DigitalPassService(db)
    digital_pass = await service.issue_diner_pass(request, wallet_client)

    return PassDownloadResponse(download_url=digital_pass.wallet_download_url)


@router.get("/user", response_model=DigitalPassListEnvelope)
@handle_api_errors
async def get_user_passes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get all digital passes owned by the authenticated user."""
    service = DigitalPassService(db)
    passes = service.list_user_passes(current_user.id)

    return DigitalPassListEnvelope(data=[DigitalPassResponse.from_pass(p) for p in passes])


@router.get("/{pass_id}", response_model=DigitalPassEnvelope)
@handle_api_errors
async def get_digital_pass(
    pass_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get one of the authenticated user's passes.

    Raises:
        404: Pass not found or owned by someone else
    """
    service = DigitalPassService(db)
    digital_pass = service.get_pass(pass_id, user_id=current_user.id)

    return DigitalPassEnvelope(data=DigitalPassResponse.from_pass(digital_pass))


@router.put("/{pass_id}/update", response_model=DigitalPassEnvelope)
@handle_api_errors
async def update_digital_pass(
    pass_id: str,
    update: PassCountersUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Overwrite points and/or visits. Omitted fields are left untouched.

    Raises:
        404: Pass not found or owned by someone else
    """
    service = DigitalPassService(db)
    digital_pass = service.update_counters(pass_id, current_user.id, update)

    return DigitalPassEnvelope(data=DigitalPassResponse.from_pass(digital_pass))


@router.post("/validate", response_model=PassValidationEnvelope)
@handle_api_errors
async def validate_digital_pass(
    request: PassValidateRequest,
    db: Session = Depends(get_db),
    staff: User = Depends(get_restaurant_staff),
):
    """
    Validate a pass at point-of-sale and count the visit.

    Raises:
        403: Caller is not restaurant staff
        404: Pass unknown, inactive, expired or issued by another restaurant
    """
    service = DigitalPassService(db)
    digital_pass = service.validate_pass(request.pass_id, staff.restaurant_id)

    return PassValidationEnvelope(
        data=PassValidationResult(
            is_valid=True,
            user=digital_pass.user_id,
            points=digital_pass.points,
            visits=digital_pass.visits,
        )
    )
