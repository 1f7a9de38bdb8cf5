# truefans/modules/digital_passes/__init__.py

"""
Digital loyalty passes: issuing, emailing, visits and point-of-sale validation.
"""

from .routes import digital_pass_router, digital_passes_router
from .models import DigitalPass, PassStatus, Restaurant, User
from .services import DigitalPassService

__all__ = [
    "digital_pass_router",
    "digital_passes_router",
    "DigitalPass",
    "PassStatus",
    "Restaurant",
    "User",
    "DigitalPassService",
]
