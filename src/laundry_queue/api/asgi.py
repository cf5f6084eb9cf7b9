"""ASGI entrypoint for the laundry queue API."""

from laundry_queue.api.app import create_app
from laundry_queue.containers import build_container

app = create_app(build_container())
