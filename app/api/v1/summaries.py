import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.api.v1.deps import get_dashboards, get_history_store, get_summarizer
from app.core.config import settings
from app.core.errors import HistoryStoreError, status_for_kind
from app.core.rate_limit import rate_limit
from app.core.security import get_current_user
from app.schemas.auth import AuthUser
from app.schemas.summaries import (
    HistoryResponse,
    SummarizeResponse,
    SummarizeResult,
    SummaryRecord,
    UrlSummarizeRequest,
)
from app.services.dashboard import DashboardRegistry, DashboardState
from app.services.history_store import HistoryStore
from app.services.summarizer import Summarizer

router = APIRouter()
logger = logging.getLogger(__name__)

HISTORY_NOT_SAVED = "history_not_saved"


def _failure_response(result: SummarizeResult, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or status_for_kind(result.error_kind),
        content=result.model_dump(mode="json"),
    )


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes | None:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


async def _save_history(
    request: Request,
    user: AuthUser,
    *,
    file_name: str,
    file_type: str,
    summary: str,
) -> tuple[SummaryRecord | None, list[str]]:
    store: HistoryStore | None = getattr(request.app.state, "history_store", None)
    if store is None:
        return None, [HISTORY_NOT_SAVED]
    try:
        record = await run_in_threadpool(
            store.create,
            user_id=user.id,
            file_name=file_name,
            file_type=file_type,
            summary=summary,
        )
    except HistoryStoreError as exc:
        logger.warning("summary_history_not_saved user=%s file=%s: %s", user.id, file_name, exc)
        return None, [HISTORY_NOT_SAVED]
    return record, []


async def _complete(
    request: Request,
    user: AuthUser,
    dashboard: DashboardState,
    result: SummarizeResult,
    *,
    file_name: str,
):
    if not result.success:
        dashboard.fail_processing()
        return _failure_response(result)

    record, warnings = await _save_history(
        request,
        user,
        file_name=file_name,
        file_type=result.mime_type or "",
        summary=result.summary or "",
    )
    dashboard.finish_processing(result.summary or "", record)
    return SummarizeResponse(
        summary=result.summary or "",
        file_uri=result.file_uri or "",
        mime_type=result.mime_type or "",
        record=record,
        warnings=warnings,
    )


@router.post("/summaries/file", response_model=SummarizeResponse)
@rate_limit()
async def summarize_file(
    request: Request,
    file: UploadFile | None = File(default=None),
    user: AuthUser = Depends(get_current_user),
    summarizer: Summarizer = Depends(get_summarizer),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    content: bytes | None = None
    filename = "uploaded-file"
    mime_type: str | None = None
    if file is not None:
        filename = file.filename or filename
        mime_type = file.content_type
        content = await _read_upload(file, settings.upload_max_bytes)
        if content is None:
            limit_mb = settings.upload_max_bytes // (1024 * 1024)
            return _failure_response(
                SummarizeResult.failed(
                    f"File too large. Maximum allowed size is {limit_mb} MB.",
                    kind="validation",
                ),
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )

    dashboard = dashboards.for_user(user)
    dashboard.begin_processing()
    try:
        result = await summarizer.summarize_file(content=content, filename=filename, mime_type=mime_type)
        return await _complete(request, user, dashboard, result, file_name=filename)
    finally:
        if dashboard.processing:
            dashboard.fail_processing()


@router.post("/summaries/url", response_model=SummarizeResponse)
@rate_limit()
async def summarize_url(
    request: Request,
    payload: UrlSummarizeRequest,
    user: AuthUser = Depends(get_current_user),
    summarizer: Summarizer = Depends(get_summarizer),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    dashboard = dashboards.for_user(user)
    dashboard.begin_processing()
    try:
        result = await summarizer.summarize_url(payload.url)
        return await _complete(
            request,
            user,
            dashboard,
            result,
            file_name=result.file_uri or payload.url.strip(),
        )
    finally:
        if dashboard.processing:
            dashboard.fail_processing()


@router.get("/summaries", response_model=HistoryResponse)
async def list_summaries(
    user: AuthUser = Depends(get_current_user),
    store: HistoryStore = Depends(get_history_store),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    try:
        records = await run_in_threadpool(store.list_for_user, user.id)
    except HistoryStoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    dashboards.for_user(user).replace_history(records)
    return HistoryResponse(items=records)


@router.delete("/summaries/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_summary(
    record_id: str,
    user: AuthUser = Depends(get_current_user),
    store: HistoryStore = Depends(get_history_store),
    dashboards: DashboardRegistry = Depends(get_dashboards),
):
    try:
        deleted = await run_in_threadpool(store.delete, user_id=user.id, record_id=record_id)
    except HistoryStoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found.")
    dashboards.for_user(user).remove(record_id)
    logger.info("summary_deleted user=%s id=%s", user.id, record_id)
