"""
Pytest configuration for the TrueFans backend.
"""
import os

# Settings are read at import time; point them at test values first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_URL", "https://app.truefans.test")

# Import all models to register them with SQLAlchemy
from truefans.modules.digital_passes.models import pass_models  # noqa: E402,F401
