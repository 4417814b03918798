"""Middleware for the tour planner API."""

from tourplanner.api.middleware.gate import RequestGate
from tourplanner.api.middleware.pipeline import (
    Continue,
    Pipeline,
    Redirect,
    Reject,
    RequestContext,
)
from tourplanner.api.middleware.request_id import request_id_middleware
from tourplanner.api.middleware.stages import build_pipeline

__all__ = [
    "Continue",
    "Pipeline",
    "Redirect",
    "Reject",
    "RequestContext",
    "RequestGate",
    "build_pipeline",
    "request_id_middleware",
]
