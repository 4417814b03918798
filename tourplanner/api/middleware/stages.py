"""Request gate stages.

Stage order is fixed by ``build_pipeline``: locale, CSRF token issue, API rate
limit, CSRF check (API), session (pages), protected routes (pages).
"""

from typing import Optional, Tuple
from urllib.parse import quote

from tourplanner.api.middleware.pipeline import (
    Action,
    Continue,
    Pipeline,
    Redirect,
    Reject,
    RequestContext,
)
from tourplanner.config import LOCALE_PATTERN
from tourplanner.core.errors import RateLimitExceeded, TransportFault
from tourplanner.core.gate_config import GateConfig
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth.models import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    AuthContext,
)
from tourplanner.infrastructure.auth.session import SessionValidator
from tourplanner.infrastructure.csrf import check_csrf_protection, get_or_create_csrf_token
from tourplanner.infrastructure.rate_limit import RateLimiter, get_client_identifier, get_preset

SAFE_METHODS = frozenset({"GET", "HEAD"})


def resolve_locale(
    path: str, gate: GateConfig, cookie_locale: Optional[str] = None
) -> Tuple[str, str, bool]:
    """Split a locale segment off the path.

    Returns:
        (locale, route_path, from_path). A locale-shaped first segment is always
        stripped; if it is not allow-listed the default locale is used.
        Without a locale segment an allow-listed cookie value wins over the default.
    """
    segments = path.split("/", 2)
    first = segments[1] if len(segments) > 1 else ""

    if LOCALE_PATTERN.match(first):
        route_path = "/" + segments[2] if len(segments) > 2 else "/"
        if first in gate.supported_locales:
            return first, route_path, True
        return gate.default_locale, route_path, False

    if cookie_locale in gate.supported_locales:
        return cookie_locale, path, False
    return gate.default_locale, path, False


def matches_prefix(path: str, prefix: str) -> bool:
    """Root matches only itself; anything else is a "starts with" match."""
    if prefix == "/":
        return path == "/"
    return path.startswith(prefix)


def normalize(path: str) -> str:
    return path.rstrip("/") or "/"


def redirect_status(method: str) -> int:
    return 302 if method.upper() in SAFE_METHODS else 303


class LocaleStage:
    """Resolve the locale and remember it in the locale cookie."""

    def __init__(self, gate: GateConfig):
        self.gate = gate

    async def process(self, context: RequestContext) -> Action:
        cookie_locale = context.cookies.get(self.gate.locale_cookie)
        locale, route_path, from_path = resolve_locale(context.path, self.gate, cookie_locale)

        if from_path and cookie_locale != locale:
            context.cookies.set(
                self.gate.locale_cookie,
                locale,
                max_age=self.gate.locale_cookie_max_age,
                httponly=False,
                secure=self.gate.secure_cookies,
            )

        is_api = normalize(route_path) == self.gate.api_prefix or route_path.startswith(
            self.gate.api_prefix + "/"
        )
        return Continue(context.evolve(locale=locale, route_path=route_path, is_api=is_api))


class CsrfTokenStage:
    """Make sure every client holds a CSRF token."""

    def __init__(self, gate: GateConfig):
        self.gate = gate

    async def process(self, context: RequestContext) -> Action:
        token = get_or_create_csrf_token(context.cookies, secure=self.gate.secure_cookies)
        return Continue(context.evolve(csrf_token=token))


class ApiRateLimitStage:
    """Charge API requests against the API preset."""

    def __init__(self, limiter: RateLimiter, preset_name: str = "API"):
        self.limiter = limiter
        self.preset_name = preset_name

    async def process(self, context: RequestContext) -> Action:
        if not context.is_api:
            return Continue()

        client_key = get_client_identifier(context.request)
        result = self.limiter.check(client_key, get_preset(self.preset_name))
        if not result.success:
            return Reject(RateLimitExceeded(result.retry_after))
        return Continue()


class CsrfCheckStage:
    """Reject state-changing API requests without a matching token."""

    def __init__(self, gate: GateConfig):
        self.gate = gate

    async def process(self, context: RequestContext) -> Action:
        if not context.is_api:
            return Continue()

        failure = check_csrf_protection(
            context.request,
            context.cookies,
            exempt_paths=self.gate.csrf_exempt_paths,
            path=context.route_path,
        )
        if failure is not None:
            return Reject(failure)
        return Continue()


class SessionStage:
    """Resolve the identity for page requests."""

    def __init__(self, validator: SessionValidator, gate: GateConfig):
        self.validator = validator
        self.gate = gate

    async def process(self, context: RequestContext) -> Action:
        if context.is_api:
            return Continue()

        auth = AuthContext.from_cookies(context.cookies.incoming)
        fault = False
        try:
            identity = await self.validator.validate_session(auth)
        except TransportFault:
            # Fail closed, but keep the cookies: the session may still be valid
            logger.warning("session_validation_unavailable", path=context.path)
            identity = None
            fault = True

        if identity is None:
            if not auth.is_empty and not fault:
                context.cookies.delete(ACCESS_TOKEN_COOKIE)
                context.cookies.delete(REFRESH_TOKEN_COOKIE)
            return Continue()

        if normalize(context.route_path) in {normalize(p) for p in self.gate.guest_only_paths}:
            return Redirect(
                f"/{context.locale}/", status_code=redirect_status(context.request.method)
            )

        return Continue(context.evolve(identity=identity))


class ProtectedRouteStage:
    """Send anonymous visitors of protected pages to the login page."""

    def __init__(self, gate: GateConfig):
        self.gate = gate

    async def process(self, context: RequestContext) -> Action:
        if context.is_api or context.identity is not None:
            return Continue()

        if not any(matches_prefix(context.route_path, p) for p in self.gate.protected_prefixes):
            return Continue()

        target = context.route_path
        query = context.request.url.query
        if query:
            target = f"{target}?{query}"

        location = f"/{context.locale}{self.gate.login_path}?redirect={quote(target, safe='')}"
        logger.info("protected_route_redirect", path=context.route_path, locale=context.locale)
        return Redirect(location, status_code=redirect_status(context.request.method))


def build_pipeline(
    gate: GateConfig, validator: SessionValidator, limiter: Optional[RateLimiter] = None
) -> Pipeline:
    """Assemble the stages in their fixed order."""
    stages = [LocaleStage(gate), CsrfTokenStage(gate)]
    if limiter is not None and gate.api_rate_limit_enabled:
        stages.append(ApiRateLimitStage(limiter, gate.api_rate_limit_preset))
    stages.extend(
        [
            CsrfCheckStage(gate),
            SessionStage(validator, gate),
            ProtectedRouteStage(gate),
        ]
    )
    return Pipeline(stages)
