"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Request

from wanderlust.domain.users import Identity

if TYPE_CHECKING:
    from wanderlust.containers import AppContainer

SESSION_USER_ID = "user_id"
SESSION_USERNAME = "username"


class LoginRequired(Exception):
    """Raised when an anonymous caller hits a protected route."""


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def get_identity(request: Request) -> Identity | None:
    """Return the identity stored in the session cookie, if any."""
    raw_id = request.session.get(SESSION_USER_ID)
    username = request.session.get(SESSION_USERNAME)
    if not raw_id or not username:
        return None
    try:
        return Identity(user_id=UUID(raw_id), username=username)
    except ValueError:
        request.session.clear()
        return None


def start_session(request: Request, identity: Identity) -> None:
    """Replace the session contents with a fresh identity."""
    request.session.clear()
    request.session[SESSION_USER_ID] = str(identity.user_id)
    request.session[SESSION_USERNAME] = identity.username


async def require_writer(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> None:
    """Block anonymous writes when the deployment asks for it."""
    if identity is None and get_container(request).settings.require_login_for_writes:
        raise LoginRequired()
