"""Upload-and-summarize and URL-summarize sequences against the inference API.

Both sequences return a :class:`SummarizeResult` instead of raising, so the
HTTP layer and the CLI can branch on ``error_kind``.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
import time
import uuid
from pathlib import Path
from typing import Awaitable, Callable

from app.ai.prompts import FILE_SUMMARY_PROMPT, VIDEO_URL_SUMMARY_PROMPT
from app.ai.types import ACTIVE, SummarizerClient
from app.core.errors import SummarizeError
from app.schemas.summaries import SummarizeResult
from app.services import upload_security

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Server configuration error: Missing API Key"

RunLogger = Callable[..., None]
Sleeper = Callable[[float], Awaitable[None]]


def _remove_temp_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("summarize_temp_cleanup_failed path=%s: %s", path, exc)


class Summarizer:
    def __init__(
        self,
        client: SummarizerClient | None,
        *,
        poll_interval_s: float = 2.0,
        poll_max_attempts: int = 150,
        tmp_dir: str | None = None,
        sleep: Sleeper = asyncio.sleep,
        run_logger: RunLogger | None = None,
    ):
        self._client = client
        self._poll_interval_s = poll_interval_s
        self._poll_max_attempts = max(1, poll_max_attempts)
        self._tmp_dir = Path(tmp_dir) if tmp_dir else Path(tempfile.gettempdir())
        self._sleep = sleep
        self._run_logger = run_logger

    @property
    def configured(self) -> bool:
        return self._client is not None

    @property
    def model(self) -> str:
        return self._client.model if self._client is not None else ""

    def _require_client(self) -> SummarizerClient:
        if self._client is None:
            raise SummarizeError(MISSING_KEY_MESSAGE, kind="configuration")
        return self._client

    def _temp_path_for(self, filename: str) -> Path:
        return self._tmp_dir / f"{uuid.uuid4().hex}-{upload_security.safe_temp_name(filename)}"

    async def summarize_file(
        self,
        *,
        content: bytes | None,
        filename: str,
        mime_type: str | None,
    ) -> SummarizeResult:
        started = time.perf_counter()
        temp_path: Path | None = None
        try:
            client = self._require_client()
            if not content:
                raise SummarizeError("No file provided", kind="validation")
            try:
                upload_security.ensure_allowed_extension(filename)
                upload_security.validate_upload_signature(filename=filename, content=content)
            except ValueError as exc:
                raise SummarizeError(str(exc), kind="validation") from exc
            resolved_mime = upload_security.resolve_mime_type(filename, mime_type)

            temp_path = self._temp_path_for(filename)
            await asyncio.to_thread(temp_path.write_bytes, content)

            logger.info("summarize_upload_started file=%s mime=%s bytes=%s", filename, resolved_mime, len(content))
            uploaded = await client.upload_file(
                str(temp_path),
                display_name=filename,
                mime_type=resolved_mime,
            )
            logger.info("summarize_upload_done uri=%s", uploaded.uri)

            remote = await self._wait_until_processed(client, uploaded.name)
            if remote.state != ACTIVE:
                raise SummarizeError(
                    f"File processing failed with state: {remote.state}",
                    kind="upstream_rejected",
                )

            logger.info("summarize_generate_started name=%s", remote.name)
            summary = await client.generate_from_file(
                FILE_SUMMARY_PROMPT,
                file_uri=remote.uri or uploaded.uri,
                mime_type=remote.mime_type or resolved_mime,
            )
            if not summary:
                raise SummarizeError("The model returned an empty summary.", kind="upstream_error")

            result = SummarizeResult.ok(summary, file_uri=uploaded.uri, mime_type=resolved_mime)
        except SummarizeError as exc:
            logger.warning("summarize_file_failed file=%s kind=%s: %s", filename, exc.kind, exc)
            result = SummarizeResult.failed(str(exc), kind=exc.kind)
        except Exception as exc:  # noqa: BLE001 - every failure becomes a typed result
            logger.exception("summarize_file_error file=%s", filename)
            result = SummarizeResult.failed(str(exc) or "Failed to process file", kind="upstream_error")
        finally:
            if temp_path is not None:
                _remove_temp_file(temp_path)

        await self._log_run("file", result, started)
        return result

    async def summarize_url(self, url: str) -> SummarizeResult:
        started = time.perf_counter()
        try:
            client = self._require_client()
            try:
                video_url = upload_security.canonical_youtube_url(url)
            except ValueError as exc:
                raise SummarizeError(str(exc), kind="validation") from exc

            logger.info("summarize_url_started url=%s", video_url)
            summary = await client.generate_from_url(VIDEO_URL_SUMMARY_PROMPT, url=video_url)
            if not summary:
                raise SummarizeError("The model returned an empty summary.", kind="upstream_error")
            result = SummarizeResult.ok(
                summary,
                file_uri=video_url,
                mime_type=upload_security.YOUTUBE_MIME_TYPE,
            )
        except SummarizeError as exc:
            logger.warning("summarize_url_failed kind=%s: %s", exc.kind, exc)
            result = SummarizeResult.failed(str(exc), kind=exc.kind)
        except Exception as exc:  # noqa: BLE001 - every failure becomes a typed result
            logger.exception("summarize_url_error")
            result = SummarizeResult.failed(str(exc) or "Failed to process URL", kind="upstream_error")

        await self._log_run("url", result, started)
        return result

    async def _wait_until_processed(self, client: SummarizerClient, name: str):
        remote = await client.get_file(name)
        attempts = 1
        while remote.is_processing:
            if attempts >= self._poll_max_attempts:
                raise SummarizeError(
                    f"File is still processing after {attempts} status checks.",
                    kind="upstream_timeout",
                )
            logger.info("summarize_file_processing name=%s attempt=%s", name, attempts)
            await self._sleep(self._poll_interval_s)
            remote = await client.get_file(name)
            attempts += 1
        return remote

    async def _log_run(self, source: str, result: SummarizeResult, started: float) -> None:
        if self._run_logger is None:
            return
        try:
            await asyncio.to_thread(
                self._run_logger,
                run_id=uuid.uuid4().hex,
                source=source,
                model=self.model,
                status="success" if result.success else "error",
                error_kind=result.error_kind,
                latency_ms=int((time.perf_counter() - started) * 1000),
            )
        except Exception:  # pragma: no cover
            logger.debug("summary_run_logging_failed", exc_info=True)
