"""API route modules."""

from .availability import router as availability_router
from .health import router as health_router

__all__ = ["health_router", "availability_router"]
