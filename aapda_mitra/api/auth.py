"""In-memory mock user registry for sign-up and sign-in."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class AuthOutcome(str, Enum):
    CREATED = "created"
    SIGNED_IN = "signed_in"
    MISSING_FIELDS = "missing_fields"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass
class User:
    id: int
    name: str
    email: str
    password: str


class UserRegistry:
    """Users held in process memory only. Nothing is persisted."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._next_id = 1

    def sign_up(self, name: str | None, email: str | None, password: str | None) -> AuthOutcome:
        if not name or not email or not password:
            return AuthOutcome.MISSING_FIELDS
        if email in self._users:
            return AuthOutcome.DUPLICATE_EMAIL

        self._users[email] = User(id=self._next_id, name=name, email=email, password=password)
        self._next_id += 1
        logger.info("Registered user %s", email)
        return AuthOutcome.CREATED

    def sign_in(self, email: str | None, password: str | None) -> AuthOutcome:
        if not email or not password:
            return AuthOutcome.MISSING_FIELDS
        user = self._users.get(email)
        if user is None or user.password != password:
            return AuthOutcome.INVALID_CREDENTIALS
        return AuthOutcome.SIGNED_IN

    def __len__(self) -> int:
        return len(self._users)
