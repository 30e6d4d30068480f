from __future__ import annotations

from typing import Any

import requests

from proppool.config import Settings
from proppool.core.snapshot import parse_espn_summary
from proppool.domain.types import GameSnapshot


def fetch_summary(settings: Settings, event_id: str | None = None) -> dict[str, Any]:
    event = event_id or settings.espn_event_id
    if not event:
        raise ValueError("ESPN_EVENT_ID is required for live polling")

    response = requests.get(
        f"{settings.espn_base_url}/summary",
        params={"event": event},
        timeout=settings.espn_timeout_sec,
    )
    response.raise_for_status()
    return response.json()


def fetch_snapshot(settings: Settings, event_id: str | None = None) -> GameSnapshot:
    return parse_espn_summary(fetch_summary(settings, event_id))
