"""ASGI application factory and dependencies for the Toolshed server."""

from toolshed.server.app import app, create_app

__all__ = ["app", "create_app"]
