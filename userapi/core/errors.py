"""Error taxonomy and HTTP classification.

Every failure the core raises on purpose is a UserServiceError subclass
tagged with a `kind`.  Adapters switch on that kind:

  validation  → 400   UserValidationError (entity construction)
  not_found   → 404   UserNotFoundError   (operation on a missing id)
  storage     → 500   StorageError        (repository medium failed)
  unknown     → 500   anything else

Exceptions raised by code outside the core carry no kind.  For those,
classify_message() falls back to scanning the message text for
"must be" / "invalid" / "Invalid" / "required".  The scan is a fallback
only: a foreign failure whose message happens to say "required" will be
reported as a client error.  Raise a tagged error instead of relying on it.
"""

from __future__ import annotations

from typing import ClassVar, Literal

ErrorKind = Literal["validation", "not_found", "storage", "unknown"]

UNKNOWN_ERROR = "Unknown error"
USER_NOT_FOUND = "User not found"

_CLIENT_ERROR_MARKERS = ("must be", "invalid", "Invalid", "required")

_STATUS_BY_KIND: dict[str, int] = {
    "validation": 400,
    "not_found": 404,
    "storage": 500,
    "unknown": 500,
}


class UserServiceError(Exception):
    """Base class for failures raised deliberately by the user core."""

    kind: ClassVar[ErrorKind] = "unknown"

    def __init__(self, message: str = UNKNOWN_ERROR) -> None:
        super().__init__(message)
        self.message = message


class UserValidationError(UserServiceError, ValueError):
    kind: ClassVar[ErrorKind] = "validation"


class UserNotFoundError(UserServiceError, LookupError):
    kind: ClassVar[ErrorKind] = "not_found"

    def __init__(self, message: str = USER_NOT_FOUND) -> None:
        super().__init__(message)


class StorageError(UserServiceError):
    kind: ClassVar[ErrorKind] = "storage"


def error_message(exc: BaseException) -> str:
    """Return the exception's message, or "Unknown error" if it has none."""
    if isinstance(exc, UserServiceError):
        return exc.message or UNKNOWN_ERROR
    return str(exc) or UNKNOWN_ERROR


def classify_message(message: str) -> ErrorKind:
    if any(marker in message for marker in _CLIENT_ERROR_MARKERS):
        return "validation"
    return "unknown"


def error_kind(exc: BaseException) -> ErrorKind:
    if isinstance(exc, UserServiceError):
        return exc.kind
    return classify_message(error_message(exc))


def status_for(exc: BaseException) -> int:
    return _STATUS_BY_KIND[error_kind(exc)]
