from __future__ import annotations

import logging

from fastapi import FastAPI

from userapi.api.errors import register_error_handlers
from userapi.api.system import router as system_router
from userapi.api.users import router as users_router
from userapi.core.config import SETTINGS, Settings
from userapi.core.logging import setup_logging
from userapi.middleware.metrics import MetricsMiddleware
from userapi.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)
from userapi.models.user import ID_POLICIES
from userapi.repos.user_repo import InMemoryUserRepo, UserRepo
from userapi.services.users_service import UserService

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_request_context_filter()

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    repo: UserRepo | None = None,
) -> FastAPI:
    """Wire repository → service → routers into a FastAPI app.

    Each app owns its repository; pass `repo` to substitute another
    UserRepo implementation.
    """
    settings = settings or SETTINGS
    repo = repo if repo is not None else InMemoryUserRepo()

    app = FastAPI(
        title="userapi",
        version=settings.architecture,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings
    app.state.user_repo = repo
    app.state.user_service = UserService(
        repo, id_policy=ID_POLICIES[settings.id_policy]
    )

    register_error_handlers(app)

    # Last-added runs first: RequestContext (outermost) → Metrics → route
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(system_router)
    app.include_router(users_router)

    logger.info(
        "userapi ready  architecture=%s env=%s id_policy=%s docs=%s",
        settings.architecture,
        settings.app_env,
        settings.id_policy,
        "on" if settings.is_dev else "off",
    )
    return app


app = create_app()
