"""API routes package."""

from server.routes.file_routes import router as file_router
from server.routes.manage_routes import router as manage_router

__all__ = ["file_router", "manage_router"]
