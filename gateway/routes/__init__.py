"""API routes for the gateway."""

from gateway.routes.file_routes import router as file_router

__all__ = ["file_router"]
