import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from google.genai import errors as genai_errors  # noqa: E402

from app.ai.providers.gemini_provider import GeminiProvider  # noqa: E402
from app.ai.types import ACTIVE, PROCESSING  # noqa: E402
from app.core.errors import SummarizeError  # noqa: E402


def _sdk_file(state):
    return SimpleNamespace(
        name="files/abc123",
        uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
        mime_type="application/pdf",
        state=SimpleNamespace(name=state),
    )


class GeminiProviderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        patcher = mock.patch("app.ai.providers.gemini_provider.genai.Client")
        self.client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.sdk = self.client_cls.return_value
        self.provider = GeminiProvider(api_key="key-123", model="gemini-test")

    async def test_upload_and_status_map_sdk_states(self):
        self.sdk.aio.files.upload = mock.AsyncMock(return_value=_sdk_file("PROCESSING"))
        self.sdk.aio.files.get = mock.AsyncMock(return_value=_sdk_file("ACTIVE"))

        uploaded = await self.provider.upload_file("/tmp/x.pdf", display_name="x.pdf", mime_type="application/pdf")
        self.assertEqual(uploaded.state, PROCESSING)
        self.assertTrue(uploaded.is_processing)

        remote = await self.provider.get_file(uploaded.name)
        self.assertEqual(remote.state, ACTIVE)
        self.sdk.aio.files.get.assert_awaited_once_with(name="files/abc123")
        self.client_cls.assert_called_once_with(api_key="key-123")

    async def test_generate_from_file_passes_file_part(self):
        self.sdk.aio.models.generate_content = mock.AsyncMock(return_value=SimpleNamespace(text="  요약 결과 \n"))

        text = await self.provider.generate_from_file(
            "summarize",
            file_uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
            mime_type="application/pdf",
        )

        self.assertEqual(text, "요약 결과")
        kwargs = self.sdk.aio.models.generate_content.await_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-test")
        self.assertEqual(kwargs["contents"][0], "summarize")
        self.assertEqual(kwargs["contents"][1].file_data.mime_type, "application/pdf")

    async def test_generate_from_url_uses_video_uri(self):
        self.sdk.aio.models.generate_content = mock.AsyncMock(return_value=SimpleNamespace(text=None))

        text = await self.provider.generate_from_url("summarize", url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        self.assertEqual(text, "")
        contents = self.sdk.aio.models.generate_content.await_args.kwargs["contents"]
        self.assertEqual(contents[0].file_data.file_uri, "https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    async def test_client_errors_are_rejections(self):
        error = genai_errors.ClientError(
            400,
            {"error": {"code": 400, "message": "Unsupported MIME type", "status": "INVALID_ARGUMENT"}},
        )
        self.sdk.aio.files.upload = mock.AsyncMock(side_effect=error)

        with self.assertRaises(SummarizeError) as ctx:
            await self.provider.upload_file("/tmp/x.pdf", display_name="x.pdf", mime_type="application/pdf")
        self.assertEqual(ctx.exception.kind, "upstream_rejected")

    async def test_server_errors_are_upstream_errors(self):
        error = genai_errors.ServerError(
            503,
            {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}},
        )
        self.sdk.aio.models.generate_content = mock.AsyncMock(side_effect=error)

        with self.assertRaises(SummarizeError) as ctx:
            await self.provider.generate_from_url("summarize", url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        self.assertEqual(ctx.exception.kind, "upstream_error")


if __name__ == "__main__":
    unittest.main()
