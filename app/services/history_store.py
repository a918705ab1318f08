from __future__ import annotations

import logging
import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from app.core.errors import HistoryStoreError
from app.schemas.summaries import SummaryRecord

logger = logging.getLogger(__name__)


class HistoryStore(Protocol):
    def list_for_user(self, user_id: str) -> list[SummaryRecord]: ...

    def create(self, *, user_id: str, file_name: str, file_type: str, summary: str) -> SummaryRecord: ...

    def delete(self, *, user_id: str, record_id: str) -> bool: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _record_from_row(row: dict[str, Any]) -> SummaryRecord:
    return SummaryRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        file_name=row.get("file_name") or "",
        file_type=row.get("file_type") or "",
        summary=row.get("summary") or "",
        created_at=row["created_at"],
    )


class SupabaseHistoryStore:
    """Summary history kept in a Supabase (PostgREST) table."""

    def __init__(self, client: Any, table: str = "summaries"):
        self._client = client
        self._table = table

    def list_for_user(self, user_id: str) -> list[SummaryRecord]:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001 - postgrest raises several error types
            logger.warning("history_list_failed user=%s: %s", user_id, exc)
            raise HistoryStoreError("Could not load summary history.") from exc
        return [_record_from_row(row) for row in (response.data or [])]

    def create(self, *, user_id: str, file_name: str, file_type: str, summary: str) -> SummaryRecord:
        payload = {
            "user_id": user_id,
            "file_name": file_name,
            "file_type": file_type,
            "summary": summary,
        }
        try:
            response = self._client.table(self._table).insert(payload).execute()
        except Exception as exc:  # noqa: BLE001
            logger.warning("history_insert_failed user=%s file=%s: %s", user_id, file_name, exc)
            raise HistoryStoreError("Could not save summary history.") from exc
        rows = response.data or []
        if not rows:
            raise HistoryStoreError("Summary history insert returned no row.")
        return _record_from_row(rows[0])

    def delete(self, *, user_id: str, record_id: str) -> bool:
        try:
            response = (
                self._client.table(self._table)
                .delete()
                .eq("id", record_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("history_delete_failed user=%s id=%s: %s", user_id, record_id, exc)
            raise HistoryStoreError("Could not delete summary.") from exc
        return bool(response.data)


class SqliteHistoryStore:
    """Local summary history with the same row shape as the hosted table."""

    def __init__(self, db_path: str):
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA busy_timeout=5000;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS summaries (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                file_name TEXT NOT NULL,
                file_type TEXT NOT NULL,
                summary TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_summaries_user_created
            ON summaries (user_id, created_at);
            """
        )

    def list_for_user(self, user_id: str) -> list[SummaryRecord]:
        try:
            with self._lock:
                cur = self._conn.execute(
                    """
                    SELECT id, user_id, file_name, file_type, summary, created_at
                    FROM summaries
                    WHERE user_id = ?
                    ORDER BY created_at DESC, rowid DESC
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()
        except sqlite3.Error as exc:
            logger.warning("history_list_failed user=%s: %s", user_id, exc)
            raise HistoryStoreError("Could not load summary history.") from exc
        return [_record_from_row(dict(row)) for row in rows]

    def create(self, *, user_id: str, file_name: str, file_type: str, summary: str) -> SummaryRecord:
        record = SummaryRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            file_name=file_name,
            file_type=file_type,
            summary=summary,
            created_at=_utc_now(),
        )
        try:
            with self._lock:
                self._conn.execute(
                    """
                    INSERT INTO summaries (id, user_id, file_name, file_type, summary, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.user_id,
                        record.file_name,
                        record.file_type,
                        record.summary,
                        record.created_at.isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            logger.warning("history_insert_failed user=%s file=%s: %s", user_id, file_name, exc)
            raise HistoryStoreError("Could not save summary history.") from exc
        return record

    def delete(self, *, user_id: str, record_id: str) -> bool:
        try:
            with self._lock:
                cur = self._conn.execute(
                    "DELETE FROM summaries WHERE id = ? AND user_id = ?",
                    (record_id, user_id),
                )
        except sqlite3.Error as exc:
            logger.warning("history_delete_failed user=%s id=%s: %s", user_id, record_id, exc)
            raise HistoryStoreError("Could not delete summary.") from exc
        return bool(cur.rowcount)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
