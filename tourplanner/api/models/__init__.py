"""API models."""

from tourplanner.api.models.requests import MagicLinkRequest, SessionRequest, SignInRequest

__all__ = [
    "MagicLinkRequest",
    "SessionRequest",
    "SignInRequest",
]
