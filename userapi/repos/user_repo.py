from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

from userapi.core.errors import StorageError, UserServiceError, error_message
from userapi.models.user import User

logger = logging.getLogger(__name__)


@runtime_checkable
class UserRepo(Protocol):
    async def create(self, user: User) -> None:
        """Insert or overwrite the entry keyed by user.id."""
        ...

    async def find_by_id(self, user_id: str) -> User | None:
        """Return the user, or None when the id is unknown."""
        ...

    async def find_all(self) -> list[User]:
        """Return a snapshot; callers may mutate it freely."""
        ...

    async def delete(self, user_id: str) -> None:
        """Remove the user.  Unknown ids are a no-op."""
        ...


@contextmanager
def _storage_errors(operation: str, user_id: str | None = None) -> Iterator[None]:
    """Log and re-raise medium failures as StorageError."""
    try:
        yield
    except UserServiceError:
        raise
    except Exception as e:
        logger.error(
            "Storage failure during %s user_id=%s: %s",
            operation,
            user_id or "-",
            error_message(e),
        )
        raise StorageError(error_message(e)) from e


class InMemoryUserRepo:
    """Process-local store keyed by user id.

    The lock keeps every map access atomic even if the repo is driven
    from worker threads as well as the event loop.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, User] = {}
        self._lock = threading.Lock()

    async def create(self, user: User) -> None:
        with _storage_errors("create", user.id), self._lock:
            self._by_id[user.id] = user
        logger.debug("Stored user id=%s total=%d", user.id, self.count())

    async def find_by_id(self, user_id: str) -> User | None:
        with _storage_errors("find_by_id", user_id), self._lock:
            return self._by_id.get(user_id)

    async def find_all(self) -> list[User]:
        with _storage_errors("find_all"), self._lock:
            return list(self._by_id.values())

    async def delete(self, user_id: str) -> None:
        with _storage_errors("delete", user_id), self._lock:
            removed = self._by_id.pop(user_id, None)
        if removed is None:
            logger.debug("Delete of unknown user id=%s ignored", user_id)

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)

    def clear(self) -> None:
        """Drop every user.  Test fixtures only; no route reaches this."""
        with self._lock:
            self._by_id.clear()
