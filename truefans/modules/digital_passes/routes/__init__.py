from .digital_pass_routes import router as digital_pass_router
from .digital_passes_routes import router as digital_passes_router

__all__ = ["digital_pass_router", "digital_passes_router"]
