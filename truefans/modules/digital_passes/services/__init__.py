from .pass_service import DigitalPassService, generate_pass_id
from .pass_email_service import DigitalPassEmailService
from .wallet_provider import PassNinjaClient, WalletPassResult

__all__ = [
    "DigitalPassService",
    "generate_pass_id",
    "DigitalPassEmailService",
    "PassNinjaClient",
    "WalletPassResult",
]
