"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from wanderlust.adapters.supabase_errors import UNIQUE_VIOLATION, execute
from wanderlust.domain.errors import DuplicateUser, StorageFailure
from wanderlust.domain.users import UserRecord
from wanderlust.services.auth import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with the given username, if present."""
        response = execute(
            self.client.table("users")
            .select("id, username, email, password_hash")
            .eq("username", username)
            .limit(1),
            "get user",
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user row and return it."""
        query = self.client.table("users").insert(
            {"username": username, "email": email, "password_hash": password_hash}
        )
        try:
            response = execute(query, "create user")
        except StorageFailure as exc:
            cause = exc.__cause__
            if isinstance(cause, APIError) and cause.code == UNIQUE_VIOLATION:
                raise DuplicateUser() from cause
            raise
        if not response.data:
            raise StorageFailure("Failed to create user in Supabase")
        return _parse_user(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        username=str(row["username"]),
        email=str(row.get("email", "")),
        password_hash=str(row.get("password_hash", "")),
    )
