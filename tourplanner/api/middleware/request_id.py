"""Request ID middleware.

Outermost middleware: the id is bound before the gate runs so gate log events
carry it too.
"""

import uuid

import structlog
from fastapi import Request

REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next):
    """Reuse the caller's X-Request-ID (e.g. from a proxy) or mint one."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        response = await call_next(request)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
