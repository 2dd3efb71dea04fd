"""Template rendering helpers."""

from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from wanderlust.domain.users import Identity

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    identity: Identity | None,
    context: dict[str, object] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render a template with the current identity in scope."""
    return templates.TemplateResponse(
        request,
        name,
        {"identity": identity, **(context or {})},
        status_code=status_code,
    )
