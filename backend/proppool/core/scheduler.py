"""Background poller: one APScheduler interval job that runs a poll cycle."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import text

from proppool.config import Settings
from proppool.db import SessionLocal, engine
from proppool.services.pipeline import run_and_log

logger = logging.getLogger(__name__)

POLL_JOB_ID = "poll_job"

_poller: BackgroundScheduler | None = None
# Ticks that overlap a running poll are dropped rather than queued.
_poll_gate = threading.Semaphore(1)


def _database_ready() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception:  # noqa: BLE001
        logger.debug("Database ping failed", exc_info=True)
        return False
    return True


def poll_tick(settings: Settings) -> None:
    if not _poll_gate.acquire(blocking=False):
        logger.info("Previous poll still running; skipping this tick")
        return
    try:
        with SessionLocal() as session:
            summary = run_and_log(session, settings)
        if summary["resolved"]:
            logger.info("Poll resolved %s props", len(summary["resolved"]))
    except Exception:  # noqa: BLE001
        logger.exception("Scheduled poll failed")
    finally:
        _poll_gate.release()


def start_scheduler(settings: Settings) -> bool:
    """Start the poller when enabled and configured. Returns whether it is running."""
    global _poller

    if not settings.enable_poller:
        logger.info("Poller disabled by ENABLE_POLLER=false")
        return False
    if not settings.espn_event_id:
        logger.warning("Poller not started: ESPN_EVENT_ID is not configured")
        return False
    if settings.sched_require_db and not _database_ready():
        logger.warning("Poller not started: database unreachable and SCHED_REQUIRE_DB=true")
        return False
    if scheduler_is_running():
        return True

    _poller = BackgroundScheduler(timezone=timezone.utc)
    _poller.add_job(
        poll_tick,
        trigger="interval",
        seconds=settings.poll_interval_sec,
        jitter=settings.poll_jitter_sec or None,
        kwargs={"settings": settings},
        id=POLL_JOB_ID,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
        replace_existing=True,
    )
    _poller.start()
    logger.info("Poller started: every %ss for event %s", settings.poll_interval_sec, settings.espn_event_id)
    return True


def stop_scheduler() -> None:
    global _poller
    if _poller is None:
        return
    _poller.shutdown(wait=False)
    _poller = None
    logger.info("Poller stopped")


def scheduler_is_running() -> bool:
    return bool(_poller and _poller.running)


def scheduler_next_run_times() -> dict[str, datetime | None]:
    jobs = _poller.get_jobs() if _poller is not None else []
    return {job.id: job.next_run_time for job in jobs}
