"""ASGI entrypoint for the dining menus API."""

from dining_menus.api.app import create_app
from dining_menus.containers import build_container

app = create_app(build_container())
