from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from app.api.v1.deps import get_dashboards, get_history_store
from app.core.errors import HistoryStoreError
from app.core.security import get_current_user
from app.schemas.auth import AuthUser
from app.schemas.dashboard import DashboardView
from app.services.dashboard import DashboardRegistry
from app.services.history_store import HistoryStore

router = APIRouter()


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(
    user: AuthUser = Depends(get_current_user),
    store: HistoryStore = Depends(get_history_store),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    try:
        records = await run_in_threadpool(store.list_for_user, user.id)
    except HistoryStoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    dashboard = dashboards.for_user(user)
    dashboard.replace_history(records)
    return dashboard.view()


@router.post("/dashboard/select/{record_id}", response_model=DashboardView)
async def select_summary(
    record_id: str,
    user: AuthUser = Depends(get_current_user),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    dashboard = dashboards.for_user(user)
    if not dashboard.select(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found.")
    return dashboard.view()


@router.post("/dashboard/reset", response_model=DashboardView)
async def reset_dashboard(
    user: AuthUser = Depends(get_current_user),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    dashboard = dashboards.for_user(user)
    dashboard.reset()
    return dashboard.view()
