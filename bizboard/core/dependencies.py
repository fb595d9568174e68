"""FastAPI dependencies for the objects owned by the running application."""

from fastapi import Request

from .config import Settings
from ..storage import Storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    """The storage instance constructed at startup."""
    return request.app.state.storage
