"""ASGI entrypoint for the LiquidTrack web app."""

from liquidtrack.api.app import create_app
from liquidtrack.containers import build_container

app = create_app(build_container())
