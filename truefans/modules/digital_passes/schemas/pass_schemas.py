# truefans/modules/digital_passes/schemas/pass_schemas.py

"""
Schemas for digital pass issuing, lookup and validation.

The wire format is camelCase (``passId``, ``isActive``); Python code uses
snake_case field names.
"""

from typing import List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.pass_models import DigitalPass, PassStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WalletPlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"


# ========== Requests ==========

class DinerPassGenerateRequest(CamelModel):
    """Anonymous diner signing up for a restaurant's wallet pass"""
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    birthday: Optional[str] = Field(None, max_length=20)
    restaurant_id: str = Field(..., min_length=1)


class PassGenerateRequest(CamelModel):
    """Issue a pass to an existing user"""
    user_id: str = Field(..., min_length=1)
    restaurant_id: str = Field(..., min_length=1)


class PassCountersUpdate(CamelModel):
    """Overwrite counters; omitted fields are left untouched"""
    points: Optional[int] = Field(None, ge=0)
    visits: Optional[int] = Field(None, ge=0)

    def supplied_fields(self) -> dict:
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class PassValidateRequest(CamelModel):
    pass_id: str = Field(..., min_length=1)


# ========== Responses ==========

class DigitalPassResponse(CamelModel):
    pass_id: str
    user_id: Optional[str] = None
    restaurant_id: str
    points: int
    visits: int
    is_active: bool
    status: PassStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    last_used: Optional[datetime] = None
    last_visit: Optional[datetime] = None
    holder_name: Optional[str] = None
    wallet_download_url: Optional[str] = None

    @classmethod
    def from_pass(cls, digital_pass: DigitalPass) -> "DigitalPassResponse":
        return cls(
            pass_id=digital_pass.pass_id,
            user_id=digital_pass.user_id,
            restaurant_id=digital_pass.restaurant_id,
            points=digital_pass.points,
            visits=digital_pass.visits,
            is_active=digital_pass.is_active,
            status=digital_pass.status,
            created_at=digital_pass.created_at,
            updated_at=digital_pass.updated_at,
            expires_at=digital_pass.expires_at,
            last_used=digital_pass.last_used_at,
            last_visit=digital_pass.last_visit_at,
            holder_name=digital_pass.holder_name,
            wallet_download_url=digital_pass.wallet_download_url,
        )


class DigitalPassEnvelope(CamelModel):
    success: bool = True
    data: DigitalPassResponse


class DigitalPassListEnvelope(CamelModel):
    success: bool = True
    data: List[DigitalPassResponse]


class PassDownloadResponse(CamelModel):
    success: bool = True
    download_url: Optional[str] = None


class PassValidationResult(CamelModel):
    is_valid: bool
    user: Optional[str] = None
    points: int
    visits: int


class PassValidationEnvelope(CamelModel):
    success: bool = True
    data: PassValidationResult


class WalletPassHolder(CamelModel):
    name: str
    email: Optional[str] = None


class WalletPassData(CamelModel):
    """Branded pass payload handed to the diner and the wallet page"""
    pass_id: str
    restaurant_name: str
    restaurant_logo: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    custom_message: Optional[str] = None
    user: WalletPassHolder
    created_at: datetime
    expires_at: Optional[datetime] = None


class PassCreatedResponse(CamelModel):
    message: str
    pass_data: WalletPassData


class VisitRecordedResponse(CamelModel):
    message: str
    pass_: DigitalPassResponse = Field(..., alias="pass")
