# truefans/modules/digital_passes/services/pass_email_service.py

import logging
from datetime import datetime
from typing import Optional

from jinja2 import Environment

from truefans.core.config import settings
from truefans.core.email_service import EmailService
from ..schemas.pass_schemas import WalletPassData
from ..templates.pass_email_templates import (
    DIGITAL_PASS_SUBJECT_TEMPLATE,
    DIGITAL_PASS_HTML_TEMPLATE,
    DIGITAL_PASS_TEXT_TEMPLATE,
)

logger = logging.getLogger(__name__)

DEFAULT_CARD_BACKGROUND = "#ffffff"
DEFAULT_CARD_TEXT_COLOR = "#333333"
DEFAULT_PRIMARY_COLOR = "#007bff"


class DigitalPassEmailService:
    """Renders and sends the "here is your pass" email"""

    def __init__(self, email_service: Optional[EmailService] = None, app_url: Optional[str] = None):
        self.email_service = email_service or EmailService()
        self.app_url = (app_url or settings.app_url).rstrip("/")
        self._html_env = Environment(autoescape=True)
        self._text_env = Environment(autoescape=False)

    def wallet_url(self, pass_id: str) -> str:
        return f"{self.app_url}/add-to-wallet/{pass_id}"

    def render(self, pass_data: WalletPassData, branding: dict) -> dict:
        """Render subject, HTML and text bodies for a pass"""
        template_vars = {
            "restaurant_name": pass_data.restaurant_name,
            "holder_name": pass_data.user.name or "there",
            "logo": pass_data.restaurant_logo,
            "custom_message": pass_data.custom_message,
            "pass_id": pass_data.pass_id,
            "expires_on": pass_data.expires_at.strftime("%B %d, %Y") if pass_data.expires_at else None,
            "card_background": branding.get("cardBackground") or DEFAULT_CARD_BACKGROUND,
            "card_text_color": branding.get("cardTextColor") or DEFAULT_CARD_TEXT_COLOR,
            "primary_color": pass_data.primary_color or DEFAULT_PRIMARY_COLOR,
            "wallet_url": self.wallet_url(pass_data.pass_id),
            "current_year": datetime.utcnow().year,
        }

        return {
            "subject": self._text_env.from_string(DIGITAL_PASS_SUBJECT_TEMPLATE).render(**template_vars),
            "html_body": self._html_env.from_string(DIGITAL_PASS_HTML_TEMPLATE).render(**template_vars),
            "text_body": self._text_env.from_string(DIGITAL_PASS_TEXT_TEMPLATE).render(**template_vars).strip(),
        }

    def send_digital_pass(self, pass_data: WalletPassData, branding: dict) -> bool:
        """
        Email a freshly issued pass to its holder.

        Returns:
            True if the email was handed to the relay, False otherwise
        """
        if not pass_data.user.email:
            logger.warning(f"No email address on file for pass {pass_data.pass_id}")
            return False

        content = self.render(pass_data, branding)
        return self.email_service.send_email(
            to_email=pass_data.user.email,
            subject=content["subject"],
            html_content=content["html_body"],
            text_content=content["text_body"],
        )
