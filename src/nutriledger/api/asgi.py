"""ASGI entrypoint for the nutriledger API."""

from nutriledger.api.app import create_app
from nutriledger.containers import build_container

app = create_app(build_container())
