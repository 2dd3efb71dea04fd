"""ASGI entrypoint for the Wanderlust app."""

from wanderlust.api.app import create_app
from wanderlust.containers import build_container

app = create_app(build_container())
