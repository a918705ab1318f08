from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.core.config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS summary_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                source TEXT NOT NULL,
                model TEXT NOT NULL,
                status TEXT NOT NULL,
                error_kind TEXT,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_summary_runs_created_at
            ON summary_runs (created_at)
            """
        )
        conn.commit()
    purge_old_records()


def log_summary_run(
    *,
    run_id: str,
    source: str,
    model: str,
    status: str,
    error_kind: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO summary_runs (
                created_at, run_id, source, model, status, error_kind, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                run_id,
                source,
                model or "unconfigured",
                status,
                error_kind,
                latency_ms,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"summary_runs": 0}

    retention = max(1, int(settings.analytics_retention_days))
    with sqlite3.connect(_get_db_path()) as conn:
        cur = conn.execute(
            "DELETE FROM summary_runs WHERE created_at < datetime('now', ?)",
            (f"-{retention} days",),
        )
        deleted = int(cur.rowcount or 0)
        conn.commit()
    return {"summary_runs": deleted}


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    with sqlite3.connect(_get_db_path()) as conn:
        total = conn.execute("SELECT COUNT(*) FROM summary_runs").fetchone()[0]
        total_7d = conn.execute(
            "SELECT COUNT(*) FROM summary_runs WHERE created_at >= datetime('now', '-7 days')"
        ).fetchone()[0]
        cur = conn.execute(
            """
            SELECT status, COUNT(*) AS count
            FROM summary_runs
            GROUP BY status
            """
        )
        by_status = {row[0]: row[1] for row in cur.fetchall()}
        cur = conn.execute(
            """
            SELECT error_kind, COUNT(*) AS count
            FROM summary_runs
            WHERE error_kind IS NOT NULL
            GROUP BY error_kind
            """
        )
        by_error_kind = {row[0]: row[1] for row in cur.fetchall()}
        avg_latency = conn.execute(
            "SELECT AVG(latency_ms) FROM summary_runs WHERE status = 'success'"
        ).fetchone()[0]
    return {
        "enabled": True,
        "total": total,
        "total_7d": total_7d,
        "by_status": by_status,
        "by_error_kind": by_error_kind,
        "avg_success_latency_ms": int(avg_latency) if avg_latency is not None else None,
    }


def get_latest(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    with sqlite3.connect(_get_db_path()) as conn:
        cur = conn.execute(
            """
            SELECT created_at, run_id, source, model, status, error_kind, latency_ms
            FROM summary_runs
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = cur.fetchall()
        return [_row_to_dict(cur, row) for row in rows]
