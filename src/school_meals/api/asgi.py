"""ASGI entrypoint for the school meals API."""

from school_meals.api.app import create_app
from school_meals.containers import build_container

app = create_app(build_container())
