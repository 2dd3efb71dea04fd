"""Let HTML forms reach PUT, PATCH and DELETE routes."""

from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send

OVERRIDABLE_METHODS = frozenset({"PUT", "PATCH", "DELETE"})
OVERRIDE_HEADER = b"x-http-method-override"


class MethodOverrideMiddleware:
    """Rewrite a POST into the method named by ``?_method=`` or the header."""

    def __init__(self, app: ASGIApp, param: str = "_method") -> None:
        self.app = app
        self.param = param

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            override = self._requested_method(scope)
            if override in OVERRIDABLE_METHODS:
                scope = {**scope, "method": override}
        await self.app(scope, receive, send)

    def _requested_method(self, scope: Scope) -> str | None:
        query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
        values = query.get(self.param)
        if values:
            return values[-1].upper()
        for name, value in scope.get("headers", []):
            if name.lower() == OVERRIDE_HEADER:
                return value.decode("latin-1").upper()
        return None
