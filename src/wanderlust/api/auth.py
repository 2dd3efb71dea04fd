"""Signup, login and logout routes."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from wanderlust.api.dependencies import get_container, get_identity, start_session
from wanderlust.api.forms import read_body
from wanderlust.api.views import render
from wanderlust.domain.errors import (
    AuthenticationFailure,
    DuplicateUser,
    ValidationError,
)
from wanderlust.domain.users import Identity

router = APIRouter(tags=["auth"])


@router.get("/signup", response_class=HTMLResponse)
async def signup_form(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> HTMLResponse:
    """Render the signup form."""
    return render(request, "users/signup.html", identity)


@router.post("/signup", response_model=None)
async def signup(request: Request) -> HTMLResponse | RedirectResponse:
    """Register a user and log them in."""
    body = await read_body(request)
    auth_service = get_container(request).auth_service
    try:
        identity = auth_service.register(body)
    except ValidationError as exc:
        return _form_error(request, "users/signup.html", exc, body, 400)
    except DuplicateUser as exc:
        return _form_error(request, "users/signup.html", exc, body, 409)
    start_session(request, identity)
    return RedirectResponse("/listings", status_code=status.HTTP_302_FOUND)


@router.get("/login", response_class=HTMLResponse)
async def login_form(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> HTMLResponse:
    """Render the login form."""
    return render(request, "users/login.html", identity)


@router.post("/login", response_model=None)
async def login(request: Request) -> HTMLResponse | RedirectResponse:
    """Check credentials and start a session."""
    body = await read_body(request)
    auth_service = get_container(request).auth_service
    try:
        identity = auth_service.authenticate(body)
    except ValidationError as exc:
        return _form_error(request, "users/login.html", exc, body, 400)
    except AuthenticationFailure as exc:
        return _form_error(request, "users/login.html", exc, body, 401)
    start_session(request, identity)
    return RedirectResponse("/listings", status_code=status.HTTP_302_FOUND)


@router.get("/logout")
async def logout(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> RedirectResponse:
    """End the session."""
    get_container(request).auth_service.logout(identity)
    request.session.clear()
    return RedirectResponse("/listings", status_code=status.HTTP_302_FOUND)


def _form_error(
    request: Request,
    template: str,
    exc: Exception,
    body: dict[str, object],
    status_code: int,
) -> HTMLResponse:
    """Re-render a form with the error and the submitted non-secret fields."""
    submitted = {key: value for key, value in body.items() if key != "password"}
    return render(
        request,
        template,
        None,
        {"error": str(exc), "form": submitted},
        status_code=status_code,
    )
