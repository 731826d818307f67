"""API exports."""

from .routes import router as health_router
from .alert import router as alert_router

__all__ = ["health_router", "alert_router"]
