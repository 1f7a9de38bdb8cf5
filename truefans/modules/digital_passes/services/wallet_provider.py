# truefans/modules/digital_passes/services/wallet_provider.py

"""
Client for the PassNinja wallet pass API.

PassNinja turns a flat field map into Apple Wallet / Google Wallet passes
and hosts a landing page the diner uses to install it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from truefans.core.config import Settings, settings as default_settings
from truefans.core.error_handling import ExternalServiceError
from ..models.pass_models import Restaurant

logger = logging.getLogger(__name__)

SERVICE_NAME = "passninja"


@dataclass
class WalletPassResult:
    serial_number: Optional[str]
    download_url: Optional[str]


class PassNinjaClient:
    """Creates wallet passes through the PassNinja REST API"""

    def __init__(self, config: Optional[Settings] = None, http_client: Optional[httpx.AsyncClient] = None):
        config = config or default_settings
        self.api_url = config.passninja_api_url.rstrip("/")
        self.account_id = config.passninja_account_id
        self.api_key = config.passninja_api_key
        self.pass_type = config.passninja_pass_type
        self.http_client = http_client or httpx.AsyncClient(timeout=config.passninja_timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self.account_id and self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-API-KEY": self.api_key,
            "X-ACCOUNT-ID": self.account_id,
            "Content-Type": "application/json",
        }

    def build_pass_fields(
        self, holder: Dict[str, Any], restaurant: Restaurant, pass_id: str, points: int
    ) -> Dict[str, Any]:
        branding = restaurant.wallet_branding
        fields = {
            "passId": pass_id,
            "barcode": pass_id,
            "points": str(points),
            "memberName": holder.get("name") or "",
            "phone": holder.get("phone") or "",
            "birthday": holder.get("birthday") or "",
            "restaurantName": restaurant.name,
            "logo": branding.get("logo"),
            "primaryColor": branding.get("primaryColor"),
            "secondaryColor": branding.get("secondaryColor"),
            "customMessage": branding.get("customMessage"),
        }
        return {key: value for key, value in fields.items() if value is not None}

    async def create_pass(
        self, holder: Dict[str, Any], restaurant: Restaurant, pass_id: str, points: int = 0
    ) -> WalletPassResult:
        """
        Create a wallet pass for a diner.

        Raises:
            ExternalServiceError: provider not configured or unreachable, or its
                reply was an error status or unusable
        """
        if not self.configured:
            logger.error("PassNinja credentials not configured")
            raise ExternalServiceError(SERVICE_NAME, "Wallet provider is not configured")

        payload = {
            "passType": self.pass_type,
            "pass": self.build_pass_fields(holder, restaurant, pass_id, points),
        }

        try:
            response = await self.http_client.post(
                f"{self.api_url}/passes", json=payload, headers=self._headers()
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning(f"Timeout creating wallet pass {pass_id}")
            raise ExternalServiceError(SERVICE_NAME, "Wallet provider timed out")
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Wallet provider rejected pass {pass_id}: "
                f"HTTP {e.response.status_code}: {e.response.text[:500]}"
            )
            raise ExternalServiceError(
                SERVICE_NAME, f"Wallet provider returned HTTP {e.response.status_code}"
            )
        except httpx.RequestError as e:
            logger.error(f"Network error creating wallet pass {pass_id}: {e}")
            raise ExternalServiceError(SERVICE_NAME, "Wallet provider is unreachable")

        result = self._parse_result(response, pass_id)
        logger.info(f"Created wallet pass {pass_id} (serial {result.serial_number})")
        return result

    def _parse_result(self, response: httpx.Response, pass_id: str) -> WalletPassResult:
        """Pull the serial number and install URL out of a create-pass reply"""
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            logger.error(f"Wallet provider sent an unreadable reply for pass {pass_id}: {response.text[:500]}")
            raise ExternalServiceError(SERVICE_NAME, "Wallet provider returned an invalid response")

        urls = data.get("urls")
        landing_url = urls.get("landing") if isinstance(urls, dict) else None
        download_url = landing_url or data.get("downloadUrl")
        if not download_url:
            logger.error(f"Wallet provider reply for pass {pass_id} has no download URL")
            raise ExternalServiceError(SERVICE_NAME, "Wallet provider did not return a download URL")

        return WalletPassResult(
            serial_number=data.get("serialNumber"),
            download_url=download_url,
        )

    async def aclose(self):
        await self.http_client.aclose()
