from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.ai.types import RemoteFile
from app.core.errors import SummarizeError

logger = logging.getLogger(__name__)


def _state_name(state: Any) -> str:
    if state is None:
        return "STATE_UNSPECIFIED"
    name = getattr(state, "name", None)
    if isinstance(name, str) and name:
        return name.upper()
    return str(state).rsplit(".", 1)[-1].upper()


def _to_remote_file(file: types.File) -> RemoteFile:
    return RemoteFile(
        name=file.name or "",
        uri=file.uri or "",
        mime_type=file.mime_type or "",
        state=_state_name(file.state),
    )


def _translate_error(exc: Exception, action: str) -> SummarizeError:
    if isinstance(exc, genai_errors.ClientError):
        return SummarizeError(f"Gemini rejected {action}: {exc}", kind="upstream_rejected")
    return SummarizeError(f"Gemini {action} failed: {exc}", kind="upstream_error")


class GeminiProvider:
    def __init__(self, api_key: str, model: str):
        self._model = model
        self._client = genai.Client(api_key=api_key)
        logger.info("gemini_provider_initialized model=%s", model)

    @property
    def model(self) -> str:
        return self._model

    async def upload_file(self, path: str, *, display_name: str, mime_type: str) -> RemoteFile:
        try:
            uploaded = await self._client.aio.files.upload(
                file=path,
                config=types.UploadFileConfig(display_name=display_name, mime_type=mime_type),
            )
        except genai_errors.APIError as exc:
            raise _translate_error(exc, "file upload") from exc
        return _to_remote_file(uploaded)

    async def get_file(self, name: str) -> RemoteFile:
        try:
            remote = await self._client.aio.files.get(name=name)
        except genai_errors.APIError as exc:
            raise _translate_error(exc, "file status lookup") from exc
        return _to_remote_file(remote)

    async def generate_from_file(self, prompt: str, *, file_uri: str, mime_type: str) -> str:
        contents = [
            prompt,
            types.Part.from_uri(file_uri=file_uri, mime_type=mime_type),
        ]
        return await self._generate(contents)

    async def generate_from_url(self, prompt: str, *, url: str) -> str:
        contents = [
            types.Part(file_data=types.FileData(file_uri=url)),
            prompt,
        ]
        return await self._generate(contents)

    async def _generate(self, contents: list[Any]) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
            )
        except genai_errors.APIError as exc:
            raise _translate_error(exc, "content generation") from exc
        return (response.text or "").strip()
