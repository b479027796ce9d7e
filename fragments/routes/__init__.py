"""API routes package."""

from fragments.routes.fragment_routes import router as fragment_router
from fragments.routes.health_routes import router as health_router

__all__ = ["fragment_router", "health_router"]
