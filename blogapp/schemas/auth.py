"""Pydantic schemas for registration, sign-in and sessions."""

from typing import Optional

from pydantic import Field, model_validator

from .base import CamelModel


class RegisterRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)


class RegisterResponse(CamelModel):
    success: bool = True
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    custom_token: str


class SignInRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionRequest(CamelModel):
    """Either an ID token or a one-time custom token to exchange."""
    id_token: Optional[str] = None
    custom_token: Optional[str] = None

    @model_validator(mode="after")
    def require_token(self) -> "SessionRequest":
        if not self.id_token and not self.custom_token:
            raise ValueError("idToken or customToken is required")
        return self


class UserSummary(CamelModel):
    success: bool = True
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class SignOutResponse(CamelModel):
    success: bool = True


class ConnectionResponse(CamelModel):
    is_online: bool
