"""API routers for the REST API."""

from gangsheets.web.routers.gangsheets import router as gangsheets_router

__all__ = ["gangsheets_router"]
