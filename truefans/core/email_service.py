"""
SMTP email service.

Renders nothing itself: callers hand over finished HTML and text bodies
and this module takes care of the relay connection.
"""

import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending transactional emails through an SMTP relay."""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.smtp_host = config.smtp_server
        self.smtp_port = config.smtp_port
        self.smtp_username = config.smtp_username
        self.smtp_password = config.smtp_password
        self.smtp_use_tls = config.smtp_use_tls
        self.from_email = config.email_from_address
        self.from_name = config.email_from_name

        if not self.smtp_host:
            logger.warning("SMTP_SERVER not configured - emails will not be sent")

    def _create_smtp_connection(self) -> Optional[smtplib.SMTP]:
        """Create SMTP connection."""
        try:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to create SMTP connection: {e}")
            return None

        try:
            if self.smtp_use_tls:
                server.starttls()
            if self.smtp_username and self.smtp_password:
                server.login(self.smtp_username, self.smtp_password)
            return server
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to create SMTP connection: {e}")
            server.close()
            return None

    def _close_smtp_connection(self, server: smtplib.SMTP) -> None:
        """Say goodbye to the relay; the message outcome is already known."""
        try:
            server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Error closing SMTP connection: {e}")
            server.close()

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str,
    ) -> bool:
        """
        Send an email with both HTML and text content.

        Returns:
            True if the relay accepted the message, False otherwise
        """
        if not self.smtp_host:
            logger.warning(f"Email not sent to {to_email} - SMTP not configured")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        server = self._create_smtp_connection()
        if not server:
            return False

        try:
            server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False
        finally:
            self._close_smtp_connection(server)

        logger.info(f"Email sent successfully to {to_email}")
        return True
