from __future__ import annotations

from fastapi import Request

from userapi.core.config import Settings
from userapi.services.users_service import UserService


def get_user_service(request: Request) -> UserService:
    """The UserService wired into this app instance by create_app()."""
    return request.app.state.user_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
