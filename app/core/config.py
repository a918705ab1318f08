from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None
    gemini_model: str
    gemini_poll_interval_s: float
    gemini_poll_max_attempts: int
    supabase_url: str | None
    supabase_key: str | None
    supabase_summaries_table: str
    history_backend: str
    history_db_path: str
    upload_max_bytes: int
    upload_tmp_dir: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    admin_api_key: str | None
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int


def load_settings() -> Settings:
    history_backend = (_get_env("HISTORY_BACKEND", "supabase") or "supabase").strip().lower()
    if history_backend not in {"supabase", "sqlite"}:
        raise RuntimeError("HISTORY_BACKEND must be either 'supabase' or 'sqlite'.")
    return Settings(
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        gemini_model=_get_env("GEMINI_MODEL", "gemini-3-flash-preview") or "gemini-3-flash-preview",
        gemini_poll_interval_s=max(0.0, _get_env_float("GEMINI_POLL_INTERVAL_S", 2.0)),
        gemini_poll_max_attempts=max(1, _get_env_int("GEMINI_POLL_MAX_ATTEMPTS", 150)),
        supabase_url=_get_env("SUPABASE_URL"),
        supabase_key=_get_env("SUPABASE_KEY"),
        supabase_summaries_table=_get_env("SUPABASE_SUMMARIES_TABLE", "summaries") or "summaries",
        history_backend=history_backend,
        history_db_path=_get_env("HISTORY_DB_PATH", "data/history.db") or "data/history.db",
        upload_max_bytes=_get_env_int("UPLOAD_MAX_BYTES", 20 * 1024 * 1024),
        upload_tmp_dir=_get_env("UPLOAD_TMP_DIR"),
        rate_limit=_get_env("RATE_LIMIT", "10/minute") or "10/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
        admin_api_key=_get_env("ADMIN_API_KEY"),
        analytics_enabled=_get_env_bool("ANALYTICS_ENABLED", True),
        analytics_db_path=_get_env("ANALYTICS_DB_PATH", "data/analytics.db") or "data/analytics.db",
        analytics_retention_days=_get_env_int("ANALYTICS_RETENTION_DAYS", 90),
    )


settings = load_settings()
