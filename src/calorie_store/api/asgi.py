"""ASGI entrypoint for the calorie store API."""

from calorie_store.api.app import create_app
from calorie_store.containers import build_container

app = create_app(build_container())
