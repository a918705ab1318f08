import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from app.ai.config import load_ai_config
from app.ai.factory import get_ai_client
from app.analytics.db import init_db, log_summary_run, purge_old_records
from app.core.config import Settings, settings
from app.integrations.supabase_auth import SupabaseAuthService, create_supabase_client
from app.services.dashboard import DashboardRegistry
from app.services.history_store import HistoryStore, SqliteHistoryStore, SupabaseHistoryStore
from app.services.summarizer import Summarizer

logger = logging.getLogger(__name__)


@dataclass
class Services:
    summarizer: Summarizer
    history_store: HistoryStore | None
    auth_service: SupabaseAuthService | None
    dashboards: DashboardRegistry


def build_services(cfg: Settings) -> Services:
    ai_cfg = load_ai_config(cfg)
    summarizer = Summarizer(
        get_ai_client(ai_cfg),
        poll_interval_s=ai_cfg.poll_interval_s,
        poll_max_attempts=ai_cfg.poll_max_attempts,
        tmp_dir=cfg.upload_tmp_dir,
        run_logger=log_summary_run,
    )

    auth_service: SupabaseAuthService | None = None
    history_store: HistoryStore | None = None
    supabase_ready = bool(cfg.supabase_url and cfg.supabase_key)
    if supabase_ready:
        # Auth and history need separate clients: a password sign-in rewires the PostgREST headers.
        auth_service = SupabaseAuthService(create_supabase_client(cfg.supabase_url, cfg.supabase_key))
    else:
        logger.warning("supabase_not_configured auth endpoints will be unavailable")

    if cfg.history_backend == "sqlite":
        history_store = SqliteHistoryStore(cfg.history_db_path)
    elif supabase_ready:
        history_store = SupabaseHistoryStore(
            create_supabase_client(cfg.supabase_url, cfg.supabase_key),
            table=cfg.supabase_summaries_table,
        )

    return Services(
        summarizer=summarizer,
        history_store=history_store,
        auth_service=auth_service,
        dashboards=DashboardRegistry(),
    )


def install_services(app: Any, services: Services) -> None:
    app.state.summarizer = services.summarizer
    app.state.history_store = services.history_store
    app.state.auth_service = services.auth_service
    app.state.dashboards = services.dashboards


@asynccontextmanager
async def lifespan(app):
    services = build_services(settings)
    install_services(app, services)
    init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("summary_runs_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover
                logger.warning("summary_runs_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    if isinstance(services.history_store, SqliteHistoryStore):
        services.history_store.close()
    for name in ("summarizer", "history_store", "auth_service", "dashboards"):
        setattr(app.state, name, None)
