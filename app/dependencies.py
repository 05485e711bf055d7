"""Request-scoped dependencies shared by the routers."""

from fastapi import Depends, Request

from .config import Settings, get_settings
from .storage import MemStorage


def get_storage(request: Request) -> MemStorage:
    """Return the record store created by the application lifespan."""
    return request.app.state.storage


def get_current_user_id(settings: Settings = Depends(get_settings)) -> int:
    # Mock auth: every request acts as the demo user.
    return settings.demo_user_id
