"""Translate Supabase client failures into domain errors."""

from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from wanderlust.domain.errors import StorageFailure

UNIQUE_VIOLATION = "23505"


class ExecutableQuery(Protocol):
    """A built PostgREST request."""

    def execute(self) -> Any:
        """Send the request and return the response."""


def execute(query: ExecutableQuery, action: str) -> Any:
    """Execute a query, wrapping transport and API errors in StorageFailure."""
    try:
        return query.execute()
    except APIError as exc:
        raise StorageFailure(f"Supabase rejected {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StorageFailure(f"Supabase unreachable during {action}") from exc
