from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import userapi` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userapi.core.config import Settings  # noqa: E402
from userapi.main import app  # noqa: E402
from userapi.repos.user_repo import InMemoryUserRepo  # noqa: E402

VALID_UUID = "3f2b8c1e-9d4a-4e7b-8a6f-1c2d3e4f5a6b"


@pytest.fixture(autouse=True)
def reset_users_state() -> None:
    """Start every test with an empty user store."""
    app.state.user_repo.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


def make_settings(**overrides: object) -> Settings:
    """Settings for tests that build their own app via create_app()."""
    values: dict[str, object] = {
        "app_env": "test",
        "log_level": "info",
        "log_json": False,
        "port": 8081,
        "architecture": "clean-architecture",
        "id_policy": "uuid",
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


def create_test_user(
    client: TestClient,
    name: str = "John Doe",
    email: str = "john@example.com",
) -> dict:
    """POST a user and return the created body."""
    resp = client.post("/users", json={"name": name, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()
