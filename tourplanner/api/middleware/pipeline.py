"""Request pipeline primitives.

A request flows through an ordered list of stages. Each stage looks at the
RequestContext and returns an Action: Continue (optionally with an updated
context), Redirect, or Reject. The first non-Continue action ends the run.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from fastapi import Request

from tourplanner.core.cookies import CookieStore
from tourplanner.core.errors import GateError
from tourplanner.core.logging import logger
from tourplanner.infrastructure.auth.models import ClientIdentity
from tourplanner.infrastructure.csrf import CsrfToken


@dataclass(frozen=True)
class RequestContext:
    """Everything the stages know about one request.

    ``route_path`` is the path with any locale segment removed.
    """

    request: Request
    cookies: CookieStore
    path: str
    route_path: str
    locale: str
    is_api: bool = False
    csrf_token: Optional[CsrfToken] = None
    identity: Optional[ClientIdentity] = None

    @classmethod
    def from_request(cls, request: Request, default_locale: str) -> "RequestContext":
        path = request.url.path
        return cls(
            request=request,
            cookies=CookieStore(incoming=dict(request.cookies)),
            path=path,
            route_path=path,
            locale=default_locale,
        )

    def evolve(self, **changes) -> "RequestContext":
        return replace(self, **changes)


@dataclass(frozen=True)
class Continue:
    context: Optional[RequestContext] = None


@dataclass(frozen=True)
class Redirect:
    location: str
    status_code: int = 302


@dataclass(frozen=True)
class Reject:
    error: GateError


Action = Union[Continue, Redirect, Reject]


class Stage(Protocol):
    """One policy step of the request gate."""

    async def process(self, context: RequestContext) -> Action:
        ...


@dataclass
class Pipeline:
    """Runs stages in order; never raises."""

    stages: Sequence[Stage] = field(default_factory=list)

    async def run(self, context: RequestContext) -> Tuple[RequestContext, Action]:
        for stage in self.stages:
            try:
                action = await stage.process(context)
            except Exception as e:
                logger.error(
                    "request_gate_stage_failed",
                    stage=type(stage).__name__,
                    path=context.path,
                    error=str(e),
                    exc_info=True,
                )
                return context, Reject(GateError())

            if isinstance(action, Continue):
                if action.context is not None:
                    context = action.context
                continue
            return context, action

        return context, Continue(context)

    def names(self) -> List[str]:
        return [type(stage).__name__ for stage in self.stages]
