from .health_router import router as health_router
from .tarball_router import router as tarball_router

__all__ = ["health_router", "tarball_router"]
