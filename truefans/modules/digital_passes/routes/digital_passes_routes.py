# truefans/modules/digital_passes/routes/digital_passes_routes.py

"""
Email-delivered pass routes for registered users.

Responses use the ``{message, pass}`` / ``{message, passData}`` shapes the
web app consumes.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from truefans.core.database import get_db
from truefans.core.error_handling import handle_api_errors

from ..dependencies import get_pass_email_service
from ..services.pass_service import DigitalPassService
from ..services.pass_email_service import DigitalPassEmailService
from ..schemas.pass_schemas import (
    PassGenerateRequest,
    PassCreatedResponse,
    DigitalPassResponse,
    VisitRecordedResponse,
    WalletPlatform,
)

router = APIRouter(prefix="/api/v1/digital-passes", tags=["Digital Passes"])

PKPASS_MEDIA_TYPE = "application/vnd.apple.pkpass"


@router.post("/generate", response_model=PassCreatedResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
def generate_digital_pass(
    request: PassGenerateRequest,
    db: Session = Depends(get_db),
    mailer: DigitalPassEmailService = Depends(get_pass_email_service),
):
    """
    Create a pass for an existing user and email it to them.

    Raises:
        404: User or restaurant not found
        502: Email could not be delivered (no pass is kept)
    """
    service = DigitalPassService(db)
    pass_data = service.issue_user_pass(request, mailer)

    return PassCreatedResponse(
        message="Digital pass created and email sent successfully",
        pass_data=pass_data,
    )


@router.get("/{pass_id}", response_model=DigitalPassResponse)
@handle_api_errors
def get_pass_details(
    pass_id: str,
    db: Session = Depends(get_db),
):
    """Get pass details by pass ID."""
    service = DigitalPassService(db)
    digital_pass = service.get_pass(pass_id, not_found_message="Pass not found")

    return DigitalPassResponse.from_pass(digital_pass)


@router.put("/{pass_id}/visit", response_model=VisitRecordedResponse)
@handle_api_errors
def record_pass_visit(
    pass_id: str,
    db: Session = Depends(get_db),
):
    """Count a visit on the pass."""
    service = DigitalPassService(db)
    digital_pass = service.record_visit(pass_id)

    return VisitRecordedResponse(
        message="Visit recorded successfully",
        pass_=DigitalPassResponse.from_pass(digital_pass),
    )


@router.get("/{pass_id}/wallet")
@handle_api_errors
def download_wallet_pass(
    pass_id: str,
    platform: WalletPlatform = Query(WalletPlatform.IOS),
    db: Session = Depends(get_db),
):
    """Download the pass document for a wallet app."""
    service = DigitalPassService(db)
    content = service.build_wallet_file(pass_id, platform)

    return Response(
        content=content,
        media_type=PKPASS_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="pass.pkpass"'},
    )
