"""API route modules."""

from .health import router as health_router
from .menu import router as menu_router

__all__ = [
    "health_router",
    "menu_router",
]
