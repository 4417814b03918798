"""CSRF token route."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from tourplanner.config import config
from tourplanner.core.cookies import CookieStore
from tourplanner.infrastructure.csrf import get_or_create_csrf_token

router = APIRouter(tags=["Security"])


@router.get("/api/csrf-token")
async def csrf_token(request: Request):
    """Return the CSRF token to send in the X-CSRF-Token header of state-changing requests."""
    context = getattr(request.state, "context", None)
    cookies = context.cookies if context is not None else CookieStore(incoming=dict(request.cookies))

    token = get_or_create_csrf_token(cookies, secure=config.is_production())
    response = JSONResponse({"token": token.value}, headers={"Cache-Control": "no-store"})

    # Without the gate nobody else writes the cookie
    if context is None:
        cookies.apply(response)
    return response
