"""ASGI entrypoint for the product inventory API."""

from product_inventory.api.app import create_app
from product_inventory.containers import build_container

app = create_app(build_container())
