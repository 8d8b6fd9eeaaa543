from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import InitVar, dataclass
from uuid import uuid4

from userapi.core.errors import UserValidationError

IdPolicy = Callable[[str], None]

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
# local@domain.tld, no whitespace or extra "@" in any part
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$", re.IGNORECASE)

MIN_NAME_LENGTH = 2


def require_id(user_id: str) -> None:
    """Accept any non-empty id."""
    if not isinstance(user_id, str) or not user_id:
        raise UserValidationError("User ID is required")


def require_uuid(user_id: str) -> None:
    """Accept only canonical 8-4-4-4-12 hex UUID text."""
    if not isinstance(user_id, str) or not _UUID_RE.fullmatch(user_id):
        raise UserValidationError("User ID is required and must be a valid UUID")


ID_POLICIES: dict[str, IdPolicy] = {
    "uuid": require_uuid,
    "non_empty": require_id,
}


def is_valid_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email) is not None


@dataclass(frozen=True, slots=True)
class User:
    """A user that only exists in a valid state.

    Construction validates id, then name, then email, and raises
    UserValidationError on the first rule that fails.  `id_policy` picks
    the id rule (defaults to require_uuid) and is not stored.
    """

    id: str
    name: str
    email: str
    id_policy: InitVar[IdPolicy | None] = None

    def __post_init__(self, id_policy: IdPolicy | None) -> None:
        (id_policy or require_uuid)(self.id)

        # Empty and whitespace-only names get the same message as short ones.
        if not isinstance(self.name, str) or len(self.name.strip()) < MIN_NAME_LENGTH:
            raise UserValidationError(
                f"Name must be at least {MIN_NAME_LENGTH} characters long"
            )

        if not isinstance(self.email, str) or not is_valid_email(self.email):
            raise UserValidationError("Invalid email format")

    @staticmethod
    def new(
        *,
        name: str,
        email: str,
        id: str | None = None,
        id_policy: IdPolicy | None = None,
    ) -> User:
        # A caller-supplied id still goes through the policy; only a missing
        # one is generated.
        return User(
            id=str(uuid4()) if id is None else id,
            name=name,
            email=email,
            id_policy=id_policy,
        )

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "email": self.email}
