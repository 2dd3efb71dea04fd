"""Domain error taxonomy."""

from dataclasses import dataclass


class MarketplaceError(Exception):
    """Base class for errors raised by the marketplace services."""


@dataclass(frozen=True)
class FieldIssue:
    """A single rejected field in a submitted payload."""

    field: str
    reason: str


class ValidationError(MarketplaceError):
    """Submitted payload does not match the expected shape."""

    def __init__(self, issues: list[FieldIssue]) -> None:
        self.issues = issues
        super().__init__(
            "; ".join(f"{issue.field}: {issue.reason}" for issue in issues)
        )


class InvalidIdentifier(MarketplaceError):
    """Identifier is not syntactically valid for the store."""

    def __init__(self, entity: str, raw: str) -> None:
        self.entity = entity
        self.raw = raw
        super().__init__(f"Invalid {entity} ID")


class NotFound(MarketplaceError):
    """Identifier is well formed but no record exists."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity.capitalize()} not found")


class AuthenticationFailure(MarketplaceError):
    """Credentials were rejected."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class DuplicateUser(MarketplaceError):
    """Username or email is already registered."""

    def __init__(self) -> None:
        super().__init__("A user with that username or email already exists")


class StorageFailure(MarketplaceError):
    """Storage backend is unreachable or rejected the operation."""
