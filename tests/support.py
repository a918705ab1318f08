import os

# Keep API tests deterministic: no rate limiting, no run-log writes.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("HISTORY_BACKEND", "sqlite")

from app.ai.types import PROCESSING, RemoteFile
from app.core.errors import AuthServiceError
from app.schemas.auth import AuthSession, AuthUser, SignUpResponse

PDF_TWO_PAGES = (
    b"%PDF-1.4\n"
    b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
    b"2 0 obj << /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 >> endobj\n"
    b"3 0 obj << /Type /Page /Parent 2 0 R >> endobj\n"
    b"4 0 obj << /Type /Page /Parent 2 0 R >> endobj\n"
    b"trailer << /Root 1 0 R >>\n%%EOF\n"
)
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
MP4_BYTES = b"\x00\x00\x00\x18ftypisom" + b"\x00" * 32

SAMPLE_SUMMARY = "# 📑 문서 요약\n\n## 💡 핵심 요약\n- 두 페이지 분량의 테스트 문서입니다."


class FakeGeminiClient:
    model = "fake-gemini"

    def __init__(
        self,
        states=("PROCESSING", "ACTIVE"),
        summary=SAMPLE_SUMMARY,
        upload_error=None,
        generate_error=None,
    ):
        self.states = list(states)
        self.summary = summary
        self.upload_error = upload_error
        self.generate_error = generate_error
        self.uploads = []
        self.status_checks = 0
        self.generations = []
        self.upload_saw_file = None

    async def upload_file(self, path, *, display_name, mime_type):
        self.upload_saw_file = os.path.exists(path)
        self.uploads.append({"path": path, "display_name": display_name, "mime_type": mime_type})
        if self.upload_error is not None:
            raise self.upload_error
        return RemoteFile(
            name="files/abc123",
            uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
            mime_type=mime_type,
            state=PROCESSING,
        )

    async def get_file(self, name):
        self.status_checks += 1
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        upload = self.uploads[-1]
        return RemoteFile(
            name=name,
            uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
            mime_type=upload["mime_type"],
            state=state,
        )

    async def generate_from_file(self, prompt, *, file_uri, mime_type):
        self.generations.append({"prompt": prompt, "file_uri": file_uri, "mime_type": mime_type})
        if self.generate_error is not None:
            raise self.generate_error
        return self.summary

    async def generate_from_url(self, prompt, *, url):
        self.generations.append({"prompt": prompt, "url": url})
        if self.generate_error is not None:
            raise self.generate_error
        return self.summary


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FakeAuthService:
    def __init__(self):
        self.users = {
            "alice@example.com": ("correct-horse", AuthUser(id="user-alice", email="alice@example.com")),
            "bob@example.com": ("battery-staple", AuthUser(id="user-bob", email="bob@example.com")),
        }
        self.tokens = {
            "token-alice": self.users["alice@example.com"][1],
            "token-bob": self.users["bob@example.com"][1],
        }
        self.signed_out = []

    def sign_up(self, email, password):
        if email in self.users:
            raise AuthServiceError("User already registered")
        user = AuthUser(id=f"user-{len(self.users) + 1}", email=email)
        self.users[email] = (password, user)
        return SignUpResponse(user=user, confirmation_required=True)

    def sign_in(self, email, password):
        entry = self.users.get(email)
        if entry is None or entry[0] != password:
            raise AuthServiceError("Invalid login credentials")
        token = f"token-{entry[1].id}"
        self.tokens[token] = entry[1]
        return AuthSession(access_token=token, refresh_token="refresh", expires_at=1_900_000_000, user=entry[1])

    def get_user(self, access_token):
        return self.tokens.get(access_token)

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)


def auth_headers(token="token-alice"):
    return {"Authorization": f"Bearer {token}"}
