from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.schemas.auth import AuthUser

bearer_scheme = HTTPBearer(auto_error=False)


def check_api_key(x_api_key: str | None) -> None:
    if not settings.admin_api_key:
        return
    if x_api_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid API key.",
        )


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    token = (credentials.credentials or "").strip()
    return token or None


async def get_optional_user(
    request: Request,
    access_token: str | None = Depends(get_access_token),
) -> AuthUser | None:
    if access_token is None:
        return None
    auth_service = getattr(request.app.state, "auth_service", None)
    if auth_service is None:
        return None
    return await run_in_threadpool(auth_service.get_user, access_token)


async def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
