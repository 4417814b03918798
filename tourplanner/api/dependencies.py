"""FastAPI dependencies for the tour planner API.

Dependency injection functions for route handlers.
"""

from fastapi import Request

from tourplanner.core.gate_config import GateConfig


def get_gate_config(request: Request) -> GateConfig:
    """Get the request gate policy from app state."""
    return request.app.state.gate_config


def get_locale(request: Request) -> str:
    """Locale resolved by the request gate.

    Note:
        Falls back to the locale cookie, then the default locale, when the
        gate did not run for this request.
    """
    locale = getattr(request.state, "locale", None)
    if locale:
        return locale

    gate = get_gate_config(request)
    cookie_locale = request.cookies.get(gate.locale_cookie)
    if cookie_locale in gate.supported_locales:
        return cookie_locale
    return gate.default_locale
