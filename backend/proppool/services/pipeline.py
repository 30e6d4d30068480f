"""Poll cycles and their run log."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from proppool.config import Settings
from proppool.core.snapshot import snapshot_from_dict
from proppool.domain.enums import RunStatus
from proppool.integrations.espn import fetch_snapshot
from proppool.models import PollRun
from proppool.services.resolution import apply_snapshot

logger = logging.getLogger(__name__)

POLL_RUN_TYPE = "poll"


def _record_run(session: Session, status: RunStatus, stats: Mapping[str, Any], error: str | None = None) -> None:
    session.add(
        PollRun(
            run_type=POLL_RUN_TYPE,
            status=status.value,
            stats_json=json.dumps(stats, sort_keys=True, default=str),
            error=error,
        )
    )
    session.commit()


def run_poll(session: Session, settings: Settings, snapshot_payload: Mapping[str, Any] | None = None) -> dict:
    """One poll cycle: obtain a snapshot, apply it, rescore when anything resolved."""
    if snapshot_payload is None:
        snapshot, source = fetch_snapshot(settings), "espn"
    else:
        snapshot, source = snapshot_from_dict(snapshot_payload), "payload"
    summary = apply_snapshot(session, snapshot)
    return {**summary, "source": source}


def run_and_log(
    session: Session,
    settings: Settings,
    snapshot_payload: Mapping[str, Any] | None = None,
) -> dict:
    """Run a poll cycle and record it in ``poll_runs``. Failures are recorded, then re-raised."""
    try:
        summary = run_poll(session, settings, snapshot_payload)
    except Exception as exc:  # noqa: BLE001
        session.rollback()
        logger.warning("Poll failed: %s", exc)
        _record_run(session, RunStatus.ERROR, {"error": str(exc)}, error=str(exc))
        raise
    _record_run(session, RunStatus.OK, summary)
    return summary


def serialize_poll_run(row: PollRun) -> dict[str, object]:
    return {
        "id": row.id,
        "created_at": row.created_at,
        "run_type": row.run_type,
        "status": row.status,
        "stats": json.loads(row.stats_json or "{}"),
        "error": row.error,
    }


def list_poll_runs(session: Session, limit: int = 50) -> list[dict[str, object]]:
    stmt = select(PollRun).order_by(desc(PollRun.created_at), desc(PollRun.id)).limit(limit)
    return [serialize_poll_run(row) for row in session.execute(stmt).scalars()]


def last_poll(session: Session) -> dict[str, object] | None:
    runs = list_poll_runs(session, limit=1)
    return runs[0] if runs else None
