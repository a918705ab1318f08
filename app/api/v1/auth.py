import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from app.api.v1.deps import get_auth_service, get_dashboards
from app.core.errors import AuthServiceError
from app.core.security import get_access_token, get_current_user, get_optional_user
from app.integrations.supabase_auth import SupabaseAuthService
from app.schemas.auth import AuthSession, AuthUser, Credentials, SessionStatus, SignUpResponse
from app.services.dashboard import DashboardRegistry

router = APIRouter()
logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"


def _raise_auth_http_error(exc: AuthServiceError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/auth/sign-up", response_model=SignUpResponse)
async def sign_up(
    payload: Credentials,
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    try:
        return await run_in_threadpool(auth_service.sign_up, payload.email, payload.password)
    except AuthServiceError as exc:
        _raise_auth_http_error(exc)


@router.post("/auth/sign-in", response_model=AuthSession)
async def sign_in(
    payload: Credentials,
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    try:
        session = await run_in_threadpool(auth_service.sign_in, payload.email, payload.password)
    except AuthServiceError as exc:
        _raise_auth_http_error(exc)
    logger.info("auth_signed_in user=%s", session.user.id)
    return session


@router.post("/auth/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    user: AuthUser = Depends(get_current_user),
    access_token: str | None = Depends(get_access_token),
    auth_service: SupabaseAuthService = Depends(get_auth_service),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    try:
        await run_in_threadpool(auth_service.sign_out, access_token)
    except AuthServiceError as exc:
        _raise_auth_http_error(exc)
    dashboards.discard(user.id)
    logger.info("auth_signed_out user=%s", user.id)


@router.get("/auth/session", response_model=SessionStatus)
async def session_status(user: AuthUser | None = Depends(get_optional_user)):
    if user is None:
        return SessionStatus(authenticated=False, redirect_to=LOGIN_ROUTE)
    return SessionStatus(authenticated=True, user=user)
