from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]
Architecture = Literal[
    "monolith",
    "layered-architecture",
    "hexagonal-architecture",
    "clean-architecture",
]
IdPolicyName = Literal["uuid", "non_empty"]

ARCHITECTURES: tuple[str, ...] = (
    "monolith",
    "layered-architecture",
    "hexagonal-architecture",
    "clean-architecture",
)

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    architecture: Architecture
    id_policy: IdPolicyName

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8081")
    architecture_raw = _getenv("ARCHITECTURE", "clean-architecture").lower()
    id_policy_raw = _getenv("ID_POLICY", "uuid").lower()

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    if architecture_raw not in ARCHITECTURES:
        raise ValueError(
            f"ARCHITECTURE must be {'|'.join(ARCHITECTURES)} (got {architecture_raw!r})"
        )

    if id_policy_raw not in ("uuid", "non_empty"):
        raise ValueError(f"ID_POLICY must be uuid|non_empty (got {id_policy_raw!r})")

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getenv_bool("LOG_JSON", False),
        port=port,
        architecture=architecture_raw,
        id_policy=id_policy_raw,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
