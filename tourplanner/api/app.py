"""FastAPI application factory for the tour planner request layer."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tourplanner.api.middleware import RequestGate, build_pipeline, request_id_middleware
from tourplanner.api.routes import auth, csrf, system
from tourplanner.config import ConfigurationError, config, validate_environment
from tourplanner.core.errors import GateError, ValidationFailure, error_body
from tourplanner.core.gate_config import GateConfig
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth import AuthBackend, SessionValidator, SupabaseAuthBackend
from tourplanner.infrastructure.database import ProfileRepository
from tourplanner.infrastructure.rate_limit import RateLimiter


async def gate_error_handler(request: Request, exc: GateError) -> JSONResponse:
    """Render GateError subclasses as structured error bodies."""
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error_code=exc.code, error=exc.message)
    return exc.to_response()


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors as 400 with field-level details."""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return ValidationFailure(details).to_response()


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the exception, never echo it."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=error_body("INTERNAL_ERROR", "Internal Server Error"))


def check_environment() -> None:
    """Validate configuration at startup; only fatal in production."""
    try:
        validate_environment()
        logger.info("environment_validated")
    except ConfigurationError as e:
        logger.warning("environment_invalid", problems=e.problems)
        if config.is_production():
            raise


def create_app(
    auth_backend: Optional[AuthBackend] = None,
    gate_config: Optional[GateConfig] = None,
    rate_limiter: Optional[RateLimiter] = None,
    session_validator: Optional[SessionValidator] = None,
    require_profile: bool = False,
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Args:
        auth_backend: Auth service collaborator (Supabase by default)
        gate_config: Request gate policy (from environment by default)
        rate_limiter: Shared limiter (a fresh one by default)
        session_validator: Overrides the validator built from auth_backend
        require_profile: Only resolve users that have a profile row
    """
    if auth_backend is None:
        check_environment()
        auth_backend = SupabaseAuthBackend()

    gate_config = gate_config or GateConfig.from_env()
    rate_limiter = rate_limiter or RateLimiter()
    session_validator = session_validator or SessionValidator(
        auth_backend,
        timeout=gate_config.auth_timeout,
        profiles=ProfileRepository() if require_profile else None,
    )

    app = FastAPI(
        title="tourplanner",
        description="Session, CSRF and rate limit gating for the tour planner web app.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.auth_backend = auth_backend
    app.state.gate_config = gate_config
    app.state.rate_limiter = rate_limiter
    app.state.session_validator = session_validator

    # Exception handlers
    app.add_exception_handler(GateError, gate_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Add middleware (last added runs first)
    pipeline = build_pipeline(gate_config, session_validator, rate_limiter)
    app.middleware("http")(RequestGate(pipeline, gate_config.default_locale))
    app.middleware("http")(request_id_middleware)

    # Register routes
    app.include_router(system.router)
    app.include_router(csrf.router)
    app.include_router(auth.router)

    logger.info(
        "app_created",
        stages=pipeline.names(),
        locales=list(gate_config.supported_locales),
        default_locale=gate_config.default_locale,
    )
    return app
