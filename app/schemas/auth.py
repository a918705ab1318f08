from __future__ import annotations

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6, max_length=256)


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    user: AuthUser


class SignUpResponse(BaseModel):
    user: AuthUser | None = None
    confirmation_required: bool


class SessionStatus(BaseModel):
    authenticated: bool
    user: AuthUser | None = None
    redirect_to: str | None = None
