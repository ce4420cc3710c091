"""REST API for the gangsheet service."""

from gangsheets.web.app import create_app

__all__ = ["create_app"]
