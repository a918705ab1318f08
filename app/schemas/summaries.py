from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.core.errors import ErrorKind


class SummaryRecord(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_type: str
    summary: str
    created_at: datetime


class SummarizeResult(BaseModel):
    success: bool
    summary: str | None = None
    file_uri: str | None = None
    mime_type: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, summary: str, *, file_uri: str, mime_type: str) -> "SummarizeResult":
        return cls(success=True, summary=summary, file_uri=file_uri, mime_type=mime_type)

    @classmethod
    def failed(cls, error: str, *, kind: ErrorKind) -> "SummarizeResult":
        return cls(success=False, error=error, error_kind=kind)


class UrlSummarizeRequest(BaseModel):
    url: str = Field(min_length=4, max_length=3000)


class SummarizeResponse(BaseModel):
    success: bool = True
    summary: str
    file_uri: str
    mime_type: str
    record: SummaryRecord | None = None
    warnings: list[str] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    items: list[SummaryRecord]
