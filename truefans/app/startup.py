"""
Application startup validation and logging setup.
"""

import logging
from typing import List, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from truefans.core.config import settings, validate_production_config
from truefans.core.database import engine

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_configuration(self) -> bool:
        try:
            validate_production_config(settings)
            return True
        except ValueError as e:
            self.errors.append(str(e))
            return False

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_email_configuration(self) -> bool:
        if not settings.email_enabled:
            self.warnings.append("SMTP relay not configured - pass emails cannot be delivered")
        return True

    def check_wallet_provider(self) -> bool:
        if not settings.wallet_provider_enabled:
            self.warnings.append("PassNinja credentials not configured - wallet passes cannot be issued")
        return True

    def run_all_checks(self) -> Tuple[bool, List[str]]:
        checks = [
            self.check_configuration,
            self.check_database_connection,
            self.check_email_configuration,
            self.check_wallet_provider,
        ]
        for check in checks:
            check()

        for warning in self.warnings:
            logger.warning(warning)
        for error in self.errors:
            logger.error(error)

        return not self.errors, self.warnings


def run_startup_checks() -> Tuple[bool, List[str]]:
    """Run all startup checks and log the outcome"""
    passed, warnings = StartupValidator().run_all_checks()

    if not passed and settings.is_production:
        raise RuntimeError("Startup checks failed in production")

    if passed:
        logger.info("All startup checks passed")
    else:
        logger.warning("Starting in development mode despite errors")

    logger.info(f"Starting in {settings.environment.upper()} mode")
    return passed, warnings


def configure_logging():
    """Configure application logging"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
