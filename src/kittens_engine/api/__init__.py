"""
HTTP polling API for the Exploding Kittens game.
"""

from .server import app, create_app

__all__ = ["app", "create_app"]
