"""User registration and credential checks."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from wanderlust.domain.errors import AuthenticationFailure
from wanderlust.domain.users import Identity, UserRecord
from wanderlust.security import hash_password, verify_password
from wanderlust.validation import validate_login, validate_signup

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with the given username, if present."""

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Create a user, raising DuplicateUser on a uniqueness conflict."""


@dataclass
class AuthService:
    """Establishes session identities; never sees a stored plaintext password."""

    repository: UserRepository
    bcrypt_rounds: int = 10
    _dummy_hash: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Unknown usernames are checked against this so both paths pay for bcrypt.
        self._dummy_hash = hash_password("", rounds=self.bcrypt_rounds)

    def register(self, raw: Mapping[str, object] | None) -> Identity:
        """Create a user from a signup form and return its identity."""
        payload = validate_signup(raw)
        user = self.repository.create_user(
            username=payload.username,
            email=str(payload.email),
            password_hash=hash_password(payload.password, rounds=self.bcrypt_rounds),
        )
        logger.info("Registered user", extra={"user_id": str(user.id)})
        return Identity(user_id=user.id, username=user.username)

    def authenticate(self, raw: Mapping[str, object] | None) -> Identity:
        """Check login credentials and return the matching identity.

        Unknown usernames and wrong passwords fail identically.
        """
        payload = validate_login(raw)
        user = self.repository.get_by_username(payload.username)
        stored_hash = user.password_hash if user is not None else self._dummy_hash
        if not verify_password(payload.password, stored_hash) or user is None:
            logger.info("Rejected login attempt")
            raise AuthenticationFailure()
        return Identity(user_id=user.id, username=user.username)

    def logout(self, identity: Identity | None) -> None:
        """Record the end of a session."""
        if identity is not None:
            logger.info("Logged out user", extra={"user_id": str(identity.user_id)})
