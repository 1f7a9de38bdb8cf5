# truefans/modules/digital_passes/models/__init__.py

from .pass_models import PassStatus, User, Restaurant, DigitalPass

__all__ = [
    "PassStatus",
    "User",
    "Restaurant",
    "DigitalPass",
]
