from __future__ import annotations

import asyncio
import logging
import uuid

import pytest
from prometheus_client import REGISTRY

from tests.conftest import VALID_UUID
from userapi.core.errors import StorageError, UserNotFoundError, UserValidationError
from userapi.models.user import User, require_id
from userapi.repos.user_repo import InMemoryUserRepo
from userapi.services.users_service import UserService


class _SpyRepo(InMemoryUserRepo):
    """Records create/delete calls on top of the in-memory behavior."""

    def __init__(self) -> None:
        super().__init__()
        self.created: list[User] = []
        self.deleted: list[str] = []

    async def create(self, user: User) -> None:
        self.created.append(user)
        await super().create(user)

    async def delete(self, user_id: str) -> None:
        self.deleted.append(user_id)
        await super().delete(user_id)


class _BrokenRepo(InMemoryUserRepo):
    async def create(self, user: User) -> None:
        raise StorageError("write failed")


class _UnreadableRepo(InMemoryUserRepo):
    async def find_by_id(self, user_id: str) -> User | None:
        raise StorageError("read failed")

    async def find_all(self) -> list[User]:
        raise StorageError("read failed")


@pytest.fixture
def spy() -> _SpyRepo:
    return _SpyRepo()


@pytest.fixture
def service(spy: _SpyRepo) -> UserService:
    return UserService(spy)


# ---- create_user ----


def test_create_user_returns_persisted_user(service: UserService, spy: _SpyRepo) -> None:
    user = asyncio.run(service.create_user("John Doe", "john@example.com"))

    assert user.name == "John Doe"
    assert user.email == "john@example.com"
    assert uuid.UUID(user.id).version == 4
    assert spy.created == [user]
    assert asyncio.run(service.get_user(user.id)) == user


def test_create_user_round_trips_to_exact_dict(service: UserService) -> None:
    user = asyncio.run(service.create_user("John Doe", "john@example.com"))
    assert user.to_dict() == {
        "id": user.id,
        "name": "John Doe",
        "email": "john@example.com",
    }


@pytest.mark.parametrize("name", ["", "   ", "A"])
def test_create_user_rejects_short_name(
    service: UserService, spy: _SpyRepo, name: str
) -> None:
    with pytest.raises(UserValidationError, match="at least 2 characters"):
        asyncio.run(service.create_user(name, "john@example.com"))
    assert spy.created == []


@pytest.mark.parametrize("email", ["invalid-email", "a@b", "@b.com"])
def test_create_user_rejects_bad_email(
    service: UserService, spy: _SpyRepo, email: str
) -> None:
    with pytest.raises(UserValidationError, match="Invalid email format"):
        asyncio.run(service.create_user("John Doe", email))
    assert spy.created == []


def test_create_user_with_supplied_id(service: UserService) -> None:
    user = asyncio.run(
        service.create_user("John Doe", "john@example.com", user_id=VALID_UUID)
    )
    assert user.id == VALID_UUID


def test_create_user_supplied_id_goes_through_policy(service: UserService) -> None:
    with pytest.raises(UserValidationError, match="valid UUID"):
        asyncio.run(service.create_user("John Doe", "john@example.com", user_id="u-1"))


def test_non_empty_policy_allows_plain_ids(spy: _SpyRepo) -> None:
    service = UserService(spy, id_policy=require_id)
    user = asyncio.run(service.create_user("John Doe", "john@example.com", user_id="u-1"))
    assert user.id == "u-1"


def test_create_user_propagates_storage_error() -> None:
    service = UserService(_BrokenRepo())
    with pytest.raises(StorageError, match="write failed"):
        asyncio.run(service.create_user("John Doe", "john@example.com"))


# ---- get_user ----


def test_get_user_returns_none_for_unknown_id(service: UserService) -> None:
    assert asyncio.run(service.get_user(VALID_UUID)) is None


def test_get_user_is_idempotent(service: UserService) -> None:
    user = asyncio.run(service.create_user("John Doe", "john@example.com"))
    first = asyncio.run(service.get_user(user.id))
    second = asyncio.run(service.get_user(user.id))
    assert first == second == user


# ---- list_users ----


def test_list_users_empty(service: UserService) -> None:
    assert asyncio.run(service.list_users()) == []


def test_list_users_reflects_creates(service: UserService) -> None:
    u1 = asyncio.run(service.create_user("Alice", "alice@example.com"))
    u2 = asyncio.run(service.create_user("Bob", "bob@example.com"))

    users = asyncio.run(service.list_users())
    assert len(users) == 2
    assert {u.id for u in users} == {u1.id, u2.id}


# ---- delete_user ----


def test_delete_then_get_is_none(service: UserService) -> None:
    user = asyncio.run(service.create_user("John Doe", "john@example.com"))
    asyncio.run(service.delete_user(user.id))
    assert asyncio.run(service.get_user(user.id)) is None


def test_double_delete_raises_not_found_second_time(
    service: UserService, spy: _SpyRepo
) -> None:
    user = asyncio.run(service.create_user("John Doe", "john@example.com"))
    asyncio.run(service.delete_user(user.id))

    with pytest.raises(UserNotFoundError) as exc_info:
        asyncio.run(service.delete_user(user.id))
    assert exc_info.value.message == "User not found"
    # The pre-check stops the second call before it reaches the repo
    assert spy.deleted == [user.id]


def test_delete_unknown_id_raises_not_found(service: UserService, spy: _SpyRepo) -> None:
    with pytest.raises(UserNotFoundError):
        asyncio.run(service.delete_user(VALID_UUID))
    assert spy.deleted == []


# ---- logging ----


def test_create_user_logs_info(
    service: UserService, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="userapi.services.users_service"):
        asyncio.run(service.create_user("John Doe", "logged@example.com"))
    assert any(
        "Created user" in m and "logged@example.com" in m for m in caplog.messages
    )


def test_rejected_payload_logs_warning(
    service: UserService, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="userapi.services.users_service"):
        with pytest.raises(UserValidationError):
            asyncio.run(service.create_user("A", "john@example.com"))
    assert any("Rejected" in m for m in caplog.messages)


# ---- metrics ----


def _operations(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "user_operations_total", {"operation": operation, "outcome": outcome}
    )
    return value if value is not None else 0.0


def test_create_storage_failure_counted_as_error() -> None:
    before = _operations("create", "error")
    with pytest.raises(StorageError):
        asyncio.run(UserService(_BrokenRepo()).create_user("John Doe", "john@example.com"))
    assert _operations("create", "error") - before == 1


@pytest.mark.parametrize(
    ("operation", "call"),
    [
        ("get", lambda s: s.get_user(VALID_UUID)),
        ("list", lambda s: s.list_users()),
        ("delete", lambda s: s.delete_user(VALID_UUID)),
    ],
)
def test_read_failures_counted_as_error(operation: str, call) -> None:
    service = UserService(_UnreadableRepo())
    before = _operations(operation, "error")
    not_found_before = _operations(operation, "not_found")

    with pytest.raises(StorageError, match="read failed"):
        asyncio.run(call(service))

    assert _operations(operation, "error") - before == 1
    assert _operations(operation, "not_found") == not_found_before
