"""Request body decoding for HTML forms and JSON."""

import re
from collections.abc import Iterable

from fastapi import Request

from wanderlust.domain.errors import FieldIssue, ValidationError

_BRACKET_PART = re.compile(r"\[([^\]]*)\]")


def parse_nested_form(items: Iterable[tuple[str, object]]) -> dict[str, object]:
    """Decode bracketed keys like ``listing[image][url]`` into nested dicts.

    Later values win when a key repeats. Non-string values (file uploads) are
    skipped.
    """
    result: dict[str, object] = {}
    for key, value in items:
        if not isinstance(value, str):
            continue
        path = _split_key(key)
        target = result
        for part in path[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[path[-1]] = value
    return result


async def read_body(request: Request) -> dict[str, object]:
    """Return the request body as a mapping, from JSON or form data."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError([FieldIssue("body", "is not valid JSON")]) from exc
        if not isinstance(body, dict):
            raise ValidationError([FieldIssue("body", "must be an object")])
        return body
    form = await request.form()
    return parse_nested_form(form.multi_items())


def _split_key(key: str) -> list[str]:
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    parts = [part for part in _BRACKET_PART.findall(bracket + rest) if part]
    return [head, *parts]
