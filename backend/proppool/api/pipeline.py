from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from proppool.core.scheduler import scheduler_is_running, scheduler_next_run_times
from proppool.db import get_db
from proppool.services.pipeline import last_poll, list_poll_runs

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


@router.get("/runs")
def poll_runs(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return list_poll_runs(db, limit=limit)


@router.get("/health")
def poller_health(db: Session = Depends(get_db)) -> dict[str, object]:
    return {
        "poller_running": scheduler_is_running(),
        "next_run_times": scheduler_next_run_times(),
        "last_poll": last_poll(db),
    }
