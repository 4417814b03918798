"""Request models for the auth API."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from tourplanner.config import LOCALE_PATTERN


class SignInRequest(BaseModel):
    """Request for /api/auth/signin and /api/auth/signup."""

    email: EmailStr


class MagicLinkRequest(BaseModel):
    """Request for /api/auth/magic-link."""

    email: EmailStr
    redirect_to: Optional[str] = Field(None, alias="redirectTo")
    locale: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not LOCALE_PATTERN.match(v):
            raise ValueError("locale must be in format 'en-US'")
        return v

    @field_validator("redirect_to")
    @classmethod
    def validate_redirect(cls, v: Optional[str]) -> Optional[str]:
        """Only same-site absolute paths; no scheme, no protocol-relative URLs."""
        if v is None or v == "":
            return None
        if not v.startswith("/") or v.startswith("//") or "\\" in v:
            raise ValueError("redirect_to must be a path starting with '/'")
        return v


class SessionRequest(BaseModel):
    """Request for /api/auth/session."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
