# truefans/modules/digital_passes/services/pass_service.py

"""
Core service for issuing, updating and validating digital passes.
"""

import json
import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from truefans.core.config import settings
from truefans.core.error_handling import NotFoundError, ExternalServiceError
from ..models.pass_models import DigitalPass, PassStatus, Restaurant, User
from ..schemas.pass_schemas import (
    DinerPassGenerateRequest, PassGenerateRequest, PassCountersUpdate,
    DigitalPassResponse, WalletPassData, WalletPassHolder, WalletPlatform,
)
from .pass_email_service import DigitalPassEmailService
from .wallet_provider import PassNinjaClient

logger = logging.getLogger(__name__)

PASS_NOT_FOUND = "Digital pass not found"
INVALID_PASS = "Invalid or expired digital pass"


def generate_pass_id() -> str:
    """32 lowercase hex characters, also used as the barcode payload"""
    return secrets.token_hex(16)


class DigitalPassService:
    """Service for the digital pass lifecycle"""

    def __init__(self, db: Session, validity_days: Optional[int] = None):
        self.db = db
        self.validity_days = validity_days or settings.pass_validity_days

    # ========== Issuing ==========

    def _stage_pass(self, restaurant_id: str, user_id: Optional[str] = None, **holder) -> DigitalPass:
        """Add a fresh pass to the session without committing it"""
        now = datetime.utcnow()
        digital_pass = DigitalPass(
            pass_id=generate_pass_id(),
            user_id=user_id,
            restaurant_id=restaurant_id,
            points=0,
            visits=0,
            is_active=True,
            status=PassStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(days=self.validity_days),
            **holder,
        )
        self.db.add(digital_pass)
        self.db.flush()
        return digital_pass

    def get_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = self.db.get(Restaurant, restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found", {"restaurant_id": restaurant_id})
        return restaurant

    async def issue_diner_pass(
        self, request: DinerPassGenerateRequest, wallet_client: PassNinjaClient
    ) -> DigitalPass:
        """
        Issue a wallet pass to a diner who has no account.

        The pass row is only committed once the wallet provider has created
        the pass; a provider failure rolls it back.
        """
        restaurant = self.get_restaurant(request.restaurant_id)

        digital_pass = self._stage_pass(
            restaurant.id,
            holder_name=request.name,
            holder_phone=request.phone,
            holder_birthday=request.birthday,
        )
        holder = {"name": request.name, "phone": request.phone, "birthday": request.birthday}

        try:
            result = await wallet_client.create_pass(
                holder, restaurant, digital_pass.pass_id, points=digital_pass.points
            )
        except Exception:
            self.db.rollback()
            raise

        digital_pass.wallet_serial_number = result.serial_number
        digital_pass.wallet_download_url = result.download_url
        self.db.commit()
        self.db.refresh(digital_pass)

        logger.info(f"Issued wallet pass {digital_pass.pass_id} for restaurant {restaurant.id}")
        return digital_pass

    def issue_user_pass(
        self, request: PassGenerateRequest, mailer: DigitalPassEmailService
    ) -> WalletPassData:
        """
        Issue a pass to an existing user and email it to them.

        The pass row is committed only after the email has been accepted by
        the relay, so a delivery failure leaves no orphan record.
        """
        user = self.db.get(User, request.user_id)
        restaurant = self.db.get(Restaurant, request.restaurant_id)
        if not user or not restaurant:
            raise NotFoundError(
                "User or restaurant not found",
                {"user_id": request.user_id, "restaurant_id": request.restaurant_id},
            )

        digital_pass = self._stage_pass(restaurant.id, user_id=user.id)
        pass_data = self.build_wallet_pass_data(digital_pass, user, restaurant)

        try:
            sent = mailer.send_digital_pass(pass_data, restaurant.wallet_branding)
        except Exception:
            self.db.rollback()
            raise

        if not sent:
            self.db.rollback()
            logger.error(f"Could not email pass to user {user.id}; pass discarded")
            raise ExternalServiceError("email", "Failed to send digital pass email")

        self.db.commit()
        logger.info(f"Issued pass {pass_data.pass_id} to user {user.id} for restaurant {restaurant.id}")
        return pass_data

    def build_wallet_pass_data(
        self, digital_pass: DigitalPass, user: User, restaurant: Restaurant
    ) -> WalletPassData:
        branding = restaurant.wallet_branding
        return WalletPassData(
            pass_id=digital_pass.pass_id,
            restaurant_name=restaurant.name,
            restaurant_logo=branding.get("logo"),
            primary_color=branding.get("primaryColor"),
            secondary_color=branding.get("secondaryColor"),
            custom_message=branding.get("customMessage"),
            user=WalletPassHolder(name=user.full_name, email=user.email),
            created_at=digital_pass.created_at,
            expires_at=digital_pass.expires_at,
        )

    # ========== Lookup ==========

    def _pass_query(self, pass_id: str, user_id: Optional[str] = None) -> Query:
        query = self.db.query(DigitalPass).filter(DigitalPass.pass_id == pass_id)
        if user_id is not None:
            query = query.filter(DigitalPass.user_id == user_id)
        return query

    def get_pass(
        self,
        pass_id: str,
        user_id: Optional[str] = None,
        not_found_message: str = PASS_NOT_FOUND,
    ) -> DigitalPass:
        """Get a pass, optionally scoped to its owner"""
        digital_pass = self._pass_query(pass_id, user_id).populate_existing().first()
        if not digital_pass:
            raise NotFoundError(not_found_message, {"pass_id": pass_id})
        return digital_pass

    def list_user_passes(self, user_id: str) -> List[DigitalPass]:
        return (
            self.db.query(DigitalPass)
            .filter(DigitalPass.user_id == user_id)
            .order_by(DigitalPass.created_at.desc(), DigitalPass.id.desc())
            .all()
        )

    # ========== Mutations ==========
    # Counters are changed with a single UPDATE statement so concurrent
    # requests never overwrite each other's increments.

    def update_counters(
        self, pass_id: str, user_id: str, update: PassCountersUpdate
    ) -> DigitalPass:
        """Overwrite only the counters present in the request"""
        values = update.supplied_fields()
        values["last_used_at"] = datetime.utcnow()

        updated = self._pass_query(pass_id, user_id).update(values, synchronize_session=False)
        if not updated:
            self.db.rollback()
            raise NotFoundError(PASS_NOT_FOUND, {"pass_id": pass_id})

        self.db.commit()
        logger.info(f"Updated pass {pass_id} fields: {sorted(values)}")
        return self.get_pass(pass_id, user_id)

    def record_visit(self, pass_id: str) -> DigitalPass:
        """Count one visit, regardless of the pass state"""
        updated = self._pass_query(pass_id).update(
            {
                DigitalPass.visits: DigitalPass.visits + 1,
                DigitalPass.last_visit_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
        if not updated:
            self.db.rollback()
            raise NotFoundError("Pass not found", {"pass_id": pass_id})

        self.db.commit()
        logger.info(f"Recorded visit for pass {pass_id}")
        return self.get_pass(pass_id)

    def validate_pass(self, pass_id: str, restaurant_id: str) -> DigitalPass:
        """
        Validate a pass at point-of-sale and count the visit.

        The validity checks are part of the UPDATE's WHERE clause, so an
        inactive, suspended, foreign or expired pass matches no row and the
        call fails closed.
        """
        now = datetime.utcnow()
        updated = (
            self.db.query(DigitalPass)
            .filter(
                DigitalPass.pass_id == pass_id,
                DigitalPass.restaurant_id == restaurant_id,
                DigitalPass.is_active.is_(True),
                DigitalPass.status == PassStatus.ACTIVE,
                or_(DigitalPass.expires_at.is_(None), DigitalPass.expires_at > now),
            )
            .update(
                {
                    DigitalPass.visits: DigitalPass.visits + 1,
                    DigitalPass.last_used_at: now,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            logger.warning(f"Rejected pass {pass_id} at restaurant {restaurant_id}")
            raise NotFoundError(INVALID_PASS, {"pass_id": pass_id})

        self.db.commit()
        logger.info(f"Validated pass {pass_id} at restaurant {restaurant_id}")
        return self.get_pass(pass_id)

    # ========== Wallet export ==========

    def build_wallet_file(self, pass_id: str, platform: WalletPlatform) -> bytes:
        """Serialized pass document for the wallet download"""
        digital_pass = self.get_pass(pass_id, not_found_message="Pass not found")
        payload = DigitalPassResponse.from_pass(digital_pass).model_dump(mode="json", by_alias=True)
        payload["platform"] = platform.value
        return json.dumps(payload).encode("utf-8")
