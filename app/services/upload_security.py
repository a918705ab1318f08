from __future__ import annotations

import mimetypes
import re
import unicodedata
from typing import Any
from urllib.parse import parse_qs, urlparse, urlunparse

ALLOWED_EXTENSIONS = {"pdf", "png", "jpg", "jpeg", "webp", "mp4", "mov"}

CONTENT_TYPE_BY_EXTENSION = {
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
}

YOUTUBE_MIME_TYPE = "video/youtube"

PDF_MAGIC = b"%PDF-"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
WEBP_RIFF_MAGIC = b"RIFF"
WEBP_WEBP_MAGIC = b"WEBP"

_YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com", "youtu.be", "www.youtu.be"}
_YOUTUBE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{6,20}$")
_UNSAFE_NAME_CHARS = re.compile(r"[^\w.\-]+", flags=re.UNICODE)


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return _safe_str(filename.rsplit(".", 1)[-1], 20).lower()


def ensure_allowed_extension(filename: str) -> str:
    ext = extension_from_filename(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}."
        )
    return ext


def resolve_mime_type(filename: str, declared: str | None) -> str:
    declared_clean = _safe_str((declared or "").split(";")[0], 120).lower()
    if declared_clean and declared_clean != "application/octet-stream":
        return declared_clean
    ext = extension_from_filename(filename)
    explicit = CONTENT_TYPE_BY_EXTENSION.get(ext)
    if explicit:
        return explicit
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def safe_temp_name(filename: str) -> str:
    """Flatten a client-supplied name into something safe to join onto a temp dir."""
    base = unicodedata.normalize("NFC", filename).replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _UNSAFE_NAME_CHARS.sub("_", base).strip("._")
    return _safe_str(cleaned, 120) or "upload"


def _looks_like_mp4_family(content: bytes) -> bool:
    if len(content) < 12:
        return False
    if content[4:8] != b"ftyp":
        return False
    major = content[8:12]
    return major in {
        b"isom",
        b"iso2",
        b"avc1",
        b"mp41",
        b"mp42",
        b"M4V ",
        b"qt  ",
        b"MSNV",
    }


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = extension_from_filename(filename)

    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if ext == "png":
        if not content.startswith(PNG_MAGIC):
            raise ValueError("File signature does not match .png content.")
        return

    if ext in {"jpg", "jpeg"}:
        if not content.startswith(JPEG_MAGIC):
            raise ValueError("File signature does not match .jpg/.jpeg content.")
        return

    if ext == "webp":
        if len(content) < 12 or not content.startswith(WEBP_RIFF_MAGIC) or content[8:12] != WEBP_WEBP_MAGIC:
            raise ValueError("File signature does not match .webp content.")
        return

    if ext in {"mp4", "mov"}:
        if not _looks_like_mp4_family(content):
            raise ValueError(f"File signature does not match .{ext} content.")
        return

    raise ValueError(f"Unsupported file type '.{ext}'.")


def normalize_public_url(raw_url: str, *, field_label: str) -> tuple[str, str]:
    value = (raw_url or "").strip()
    if not value:
        raise ValueError(f"{field_label} is required.")
    if not re.match(r"^https?://", value, flags=re.IGNORECASE):
        value = f"https://{value}"
    parsed = urlparse(value)
    if parsed.scheme.lower() not in {"http", "https"}:
        raise ValueError(f"Only http/https {field_label.lower()}s are supported.")
    if not parsed.netloc:
        raise ValueError(f"Invalid {field_label.lower()}.")
    hostname = (parsed.hostname or "").lower().strip()
    if not hostname:
        raise ValueError(f"Invalid {field_label.lower()} host.")
    normalized = urlunparse(
        (
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path or "/",
            "",
            parsed.query,
            "",
        )
    )
    return normalized, hostname


def extract_youtube_id(url: str) -> str | None:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = parsed.netloc.lower().split(":")[0]
    if host not in _YOUTUBE_HOSTS:
        return None

    value: str | None = None
    if host in ("youtu.be", "www.youtu.be"):
        value = parsed.path.strip("/")
    elif parsed.path == "/watch":
        video_ids = parse_qs(parsed.query).get("v") or []
        value = video_ids[0] if video_ids else None
    elif parsed.path.startswith("/shorts/"):
        value = parsed.path.split("/shorts/")[-1].strip("/")
    elif parsed.path.startswith("/embed/"):
        value = parsed.path.split("/embed/")[-1].strip("/")

    if not value or not _YOUTUBE_ID_RE.match(value):
        return None
    return value


def canonical_youtube_url(raw_url: str) -> str:
    normalized, _hostname = normalize_public_url(raw_url, field_label="Video URL")
    video_id = extract_youtube_id(normalized)
    if not video_id:
        raise ValueError("Only YouTube video URLs are supported.")
    return f"https://www.youtube.com/watch?v={video_id}"
