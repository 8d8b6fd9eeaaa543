from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from userapi.core.errors import UserNotFoundError, UserValidationError
from userapi.core.metrics import USER_OPERATIONS
from userapi.models.user import IdPolicy, User, require_uuid
from userapi.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


@contextmanager
def _count_errors(operation: str) -> Iterator[None]:
    """Count a failed repository call as outcome="error" and re-raise."""
    try:
        yield
    except Exception:
        USER_OPERATIONS.labels(operation=operation, outcome="error").inc()
        raise


class UserService:
    """Create, read, list and delete users against a UserRepo.

    Lookups return None for unknown ids; only delete_user turns absence
    into UserNotFoundError.
    """

    def __init__(self, repo: UserRepo, *, id_policy: IdPolicy = require_uuid) -> None:
        self._repo = repo
        self._id_policy = id_policy

    async def create_user(
        self, name: str, email: str, *, user_id: str | None = None
    ) -> User:
        try:
            user = User.new(
                name=name, email=email, id=user_id, id_policy=self._id_policy
            )
        except UserValidationError as e:
            logger.warning("Rejected user payload: %s", e.message)
            USER_OPERATIONS.labels(operation="create", outcome="rejected").inc()
            raise

        with _count_errors("create"):
            await self._repo.create(user)

        logger.info("Created user id=%s email=%s", user.id, user.email)
        USER_OPERATIONS.labels(operation="create", outcome="ok").inc()
        return user

    async def get_user(self, user_id: str) -> User | None:
        with _count_errors("get"):
            user = await self._repo.find_by_id(user_id)
        if user is None:
            logger.info("User not found id=%s", user_id)
            USER_OPERATIONS.labels(operation="get", outcome="not_found").inc()
            return None
        USER_OPERATIONS.labels(operation="get", outcome="ok").inc()
        return user

    async def list_users(self) -> list[User]:
        with _count_errors("list"):
            users = await self._repo.find_all()
        logger.debug("Listed users count=%d", len(users))
        USER_OPERATIONS.labels(operation="list", outcome="ok").inc()
        return users

    async def delete_user(self, user_id: str) -> None:
        with _count_errors("delete"):
            existing = await self._repo.find_by_id(user_id)
        if existing is None:
            logger.warning("Delete rejected, user not found id=%s", user_id)
            USER_OPERATIONS.labels(operation="delete", outcome="not_found").inc()
            raise UserNotFoundError()

        with _count_errors("delete"):
            await self._repo.delete(user_id)
        logger.info("Deleted user id=%s", user_id)
        USER_OPERATIONS.labels(operation="delete", outcome="ok").inc()
