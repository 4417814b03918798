"""HTTP layer: app factory, gate middleware and routes."""

from tourplanner.api.app import create_app

__all__ = ["create_app"]
