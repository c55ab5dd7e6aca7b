"""API layer - HTTP routes for UI controllers"""

from .routes import router

__all__ = ["router"]
