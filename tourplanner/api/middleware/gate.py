"""Request gate middleware.

Runs every request through the gate pipeline and turns the outcome into a
response: a redirect, a structured error, or the downstream handler's response.
Cookies written by the stages are applied to whichever response is returned.
"""

from fastapi import Request
from fastapi.responses import RedirectResponse

from tourplanner.api.middleware.pipeline import Pipeline, Redirect, Reject, RequestContext


class RequestGate:
    """HTTP middleware wrapping a Pipeline.

    Register with ``app.middleware("http")(RequestGate(pipeline, default_locale))``.
    """

    def __init__(self, pipeline: Pipeline, default_locale: str):
        self.pipeline = pipeline
        self.default_locale = default_locale

    async def __call__(self, request: Request, call_next):
        context = RequestContext.from_request(request, self.default_locale)
        context, action = await self.pipeline.run(context)

        if isinstance(action, Redirect):
            response = RedirectResponse(action.location, status_code=action.status_code)
        elif isinstance(action, Reject):
            response = action.error.to_response()
        else:
            request.state.context = context
            request.state.locale = context.locale
            if context.identity is not None:
                request.state.identity = context.identity
            response = await call_next(request)

        return context.cookies.apply(response)
