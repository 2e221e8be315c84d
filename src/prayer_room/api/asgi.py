"""ASGI entrypoint for the prayer room API."""

from prayer_room.api.app import create_app
from prayer_room.containers import build_container

app = create_app(build_container())
