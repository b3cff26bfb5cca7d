"""ASGI entrypoint for the Pixel Cat Calories API."""

from pixel_cat_calories.api.app import create_app
from pixel_cat_calories.containers import build_container

app = create_app(build_container())
