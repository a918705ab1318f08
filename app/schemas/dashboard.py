from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.auth import AuthUser
from app.schemas.summaries import SummaryRecord


class DashboardView(BaseModel):
    user: AuthUser
    history: list[SummaryRecord] = Field(default_factory=list)
    selected: SummaryRecord | None = None
    summary: str | None = None
    processing: bool = False
