"""ASGI entrypoint for the FamilySync API."""

from familysync.api.app import create_app
from familysync.containers import build_container

app = create_app(build_container())
