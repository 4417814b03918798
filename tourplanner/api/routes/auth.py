"""Auth routes: magic-link sign in, session establishment, sign out."""

import asyncio
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from tourplanner.api.dependencies import get_locale
from tourplanner.api.models import MagicLinkRequest, SessionRequest, SignInRequest
from tourplanner.config import config
from tourplanner.core.errors import ErrorCode, GateError
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    AuthBackend,
    AuthContext,
    ClientIdentity,
    SessionValidator,
    get_auth_backend,
    get_session_validator,
    require_identity,
)
from tourplanner.infrastructure.rate_limit import rate_limit

router = APIRouter(prefix="/api/auth", tags=["Auth"])

SESSION_COOKIE_MAX_AGE = 7 * 24 * 60 * 60


def callback_url(request: Request, next_path: str) -> str:
    """Where the emailed link lands; the callback page forwards to next_path."""
    origin = str(request.base_url).rstrip("/")
    return f"{origin}/auth-callback?next={quote(next_path, safe='')}"


@router.post("/signin", dependencies=[Depends(rate_limit("AUTH"))])
async def signin(
    body: SignInRequest,
    request: Request,
    backend: AuthBackend = Depends(get_auth_backend),
    locale: str = Depends(get_locale),
):
    """Start a passwordless sign in for an existing account."""
    try:
        await asyncio.to_thread(
            backend.send_magic_link, body.email, callback_url(request, f"/{locale}/"), False
        )
    except Exception as e:
        logger.error("magic_link_send_failed", email=body.email, error=str(e))
        raise GateError() from e

    return {}


@router.post("/signup", dependencies=[Depends(rate_limit("AUTH"))])
async def signup(
    body: SignInRequest,
    request: Request,
    backend: AuthBackend = Depends(get_auth_backend),
    locale: str = Depends(get_locale),
):
    """Register an address; the emailed link confirms it and finishes registration."""
    try:
        await asyncio.to_thread(
            backend.send_magic_link,
            body.email,
            callback_url(request, f"/{locale}/register/complete"),
            True,
        )
    except Exception as e:
        logger.error("signup_failed", email=body.email, error=str(e))
        raise GateError() from e

    logger.info("signup_link_sent", email=body.email)
    return {"message": "Confirmation link sent."}


@router.post("/magic-link", dependencies=[Depends(rate_limit("MAGIC_LINK"))])
async def magic_link(
    body: MagicLinkRequest,
    request: Request,
    backend: AuthBackend = Depends(get_auth_backend),
    locale: str = Depends(get_locale),
):
    """Email a sign-in link, registering the address if it is new.

    - **email**: Address to send the link to
    - **redirectTo**: Path to return to after sign in (existing users only)
    - **locale**: Locale for the landing page
    """
    lang = body.locale or locale

    try:
        exists = await asyncio.to_thread(backend.user_exists, body.email)
        if exists:
            next_path = body.redirect_to or f"/{lang}/"
        else:
            next_path = f"/{lang}/register/complete"

        await asyncio.to_thread(
            backend.send_magic_link, body.email, callback_url(request, next_path), not exists
        )
    except Exception as e:
        logger.error("magic_link_send_failed", email=body.email, error=str(e))
        raise GateError() from e

    logger.info("magic_link_sent", email=body.email, new_user=not exists)
    return Response(status_code=200)


@router.post("/session", dependencies=[Depends(rate_limit("AUTH"))])
async def establish_session(
    body: SessionRequest,
    validator: SessionValidator = Depends(get_session_validator),
):
    """Turn tokens from the magic-link callback into session cookies."""
    identity = await validator.validate_session(
        AuthContext(access_token=body.access_token, refresh_token=body.refresh_token)
    )
    if identity is None:
        raise GateError(
            "Failed to establish session",
            code=ErrorCode.SESSION_FAILED.value,
            status_code=400,
        )

    response = JSONResponse({"success": True, "user": identity.to_dict()})
    for name, value in (
        (ACCESS_TOKEN_COOKIE, body.access_token),
        (REFRESH_TOKEN_COOKIE, body.refresh_token),
    ):
        response.set_cookie(
            key=name,
            value=value,
            max_age=SESSION_COOKIE_MAX_AGE,
            path="/",
            secure=config.is_production(),
            httponly=True,
            samesite="lax",
        )

    logger.info("session_established", user_id=identity.user_id)
    return response


@router.post("/signout")
async def signout(
    request: Request,
    backend: AuthBackend = Depends(get_auth_backend),
    locale: str = Depends(get_locale),
):
    """End the session and send the browser to the logout page."""
    access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if access_token:
        try:
            await asyncio.to_thread(backend.sign_out, access_token)
        except Exception as e:
            # Cookies are cleared regardless
            logger.warning("sign_out_failed", error=str(e))

    response = RedirectResponse(f"/{locale}/logout", status_code=303)
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")
    return response


@router.get("/me")
async def me(identity: ClientIdentity = Depends(require_identity)):
    """The signed-in user."""
    return {"user": identity.to_dict()}
