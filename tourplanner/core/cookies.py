"""Cookie store used by the request pipeline.

Reads come from the incoming request; writes are recorded and applied to
whatever response the pipeline finally produces.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from starlette.responses import Response


@dataclass
class CookieWrite:
    """A pending Set-Cookie (or deletion when max_age is 0)."""

    name: str
    value: str
    max_age: int
    httponly: bool = True
    secure: bool = False
    samesite: str = "lax"
    path: str = "/"


@dataclass
class CookieStore:
    """Request cookies plus pending writes."""

    incoming: Mapping[str, str] = field(default_factory=dict)
    pending: List[CookieWrite] = field(default_factory=list)

    def get(self, name: str) -> Optional[str]:
        """Current value, taking pending writes of this request into account."""
        for write in reversed(self.pending):
            if write.name == name:
                return write.value if write.max_age > 0 else None
        return self.incoming.get(name)

    def set(
        self,
        name: str,
        value: str,
        *,
        max_age: int,
        httponly: bool = True,
        secure: bool = False,
        samesite: str = "lax",
        path: str = "/",
    ) -> None:
        self.pending.append(
            CookieWrite(
                name=name,
                value=value,
                max_age=max_age,
                httponly=httponly,
                secure=secure,
                samesite=samesite,
                path=path,
            )
        )

    def delete(self, name: str, path: str = "/") -> None:
        self.pending.append(CookieWrite(name=name, value="", max_age=0, path=path))

    def apply(self, response: Response) -> Response:
        """Write pending cookies onto the response."""
        for write in self.pending:
            if write.max_age > 0:
                response.set_cookie(
                    key=write.name,
                    value=write.value,
                    max_age=write.max_age,
                    path=write.path,
                    secure=write.secure,
                    httponly=write.httponly,
                    samesite=write.samesite,
                )
            else:
                response.delete_cookie(key=write.name, path=write.path)
        return response
