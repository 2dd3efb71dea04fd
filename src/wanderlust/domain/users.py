"""Domain models for users and session identity."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    username: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class Identity:
    """Authenticated user attached to a browser session."""

    user_id: UUID
    username: str
