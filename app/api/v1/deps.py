from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.integrations.supabase_auth import SupabaseAuthService
from app.services.dashboard import DashboardRegistry
from app.services.history_store import HistoryStore
from app.services.summarizer import Summarizer


def _state_or_503(request: Request, name: str, detail: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
    return value


def get_summarizer(request: Request) -> Summarizer:
    return _state_or_503(request, "summarizer", "Summarizer is not available.")


def get_history_store(request: Request) -> HistoryStore:
    return _state_or_503(request, "history_store", "Summary history is not configured.")


def get_auth_service(request: Request) -> SupabaseAuthService:
    return _state_or_503(request, "auth_service", "Authentication is not configured.")


def get_dashboards(request: Request) -> DashboardRegistry:
    return _state_or_503(request, "dashboards", "Dashboard state is not available.")
