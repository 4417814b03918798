"""Routes for the tour planner API."""

from tourplanner.api.routes import auth, csrf, system

__all__ = ["auth", "csrf", "system"]
