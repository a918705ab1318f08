"""
Supabase Auth wrapper: password sign-up/sign-in, token validation and sign-out.
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from app.core.errors import AuthServiceError
from app.schemas.auth import AuthSession, AuthUser, SignUpResponse

logger = logging.getLogger(__name__)


def create_supabase_client(url: str, key: str) -> Client:
    """Server-side client: no session persistence, no background token refresh."""
    return create_client(
        url,
        key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


def _to_auth_user(user: Any) -> AuthUser:
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


class SupabaseAuthService:
    def __init__(self, client: Client):
        self._client = client

    def sign_up(self, email: str, password: str) -> SignUpResponse:
        try:
            response = self._client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:  # noqa: BLE001 - gotrue raises AuthApiError and friends
            logger.info("auth_sign_up_failed email=%s: %s", email, exc)
            raise AuthServiceError(str(exc) or "Sign-up failed.") from exc
        user = _to_auth_user(response.user) if response.user else None
        return SignUpResponse(user=user, confirmation_required=response.session is None)

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:  # noqa: BLE001
            logger.info("auth_sign_in_failed email=%s: %s", email, exc)
            raise AuthServiceError(str(exc) or "Invalid login credentials.") from exc
        session = response.session
        if session is None or response.user is None:
            raise AuthServiceError("Sign-in did not return a session.")
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            user=_to_auth_user(response.user),
        )

    def get_user(self, access_token: str) -> AuthUser | None:
        try:
            response = self._client.auth.get_user(access_token)
        except Exception as exc:  # noqa: BLE001
            logger.info("auth_get_user_failed: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return _to_auth_user(response.user)

    def sign_out(self, access_token: str) -> None:
        try:
            self._client.auth.admin.sign_out(access_token)
        except Exception as exc:  # noqa: BLE001
            logger.warning("auth_sign_out_failed: %s", exc)
            raise AuthServiceError("Sign-out failed.") from exc
