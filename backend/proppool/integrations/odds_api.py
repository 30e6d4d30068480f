from __future__ import annotations

from datetime import datetime, timezone

import requests

from proppool.config import get_settings
from proppool.services.catalog import ODDS_MARKETS


def fetch_event_odds(
    event_id: str | None = None,
    markets: tuple[str, ...] = ODDS_MARKETS,
    regions: str = "us",
    odds_format: str = "american",
) -> tuple[dict, dict]:
    settings = get_settings()
    if not settings.odds_api_key:
        raise ValueError("ODDS_API_KEY is required to build a catalog from odds")
    event = event_id or settings.odds_event_id
    if not event:
        raise ValueError("ODDS_EVENT_ID is required to build a catalog from odds")

    response = requests.get(
        f"{settings.odds_api_base_url}/sports/{settings.odds_sport_key}/events/{event}/odds",
        params={
            "apiKey": settings.odds_api_key,
            "regions": regions,
            "markets": ",".join(markets),
            "oddsFormat": odds_format,
        },
        timeout=20,
    )
    response.raise_for_status()

    fetched_at = datetime.now(timezone.utc)
    quota_headers = {
        key: value
        for key, value in response.headers.items()
        if key.lower().startswith("x-requests-")
    }
    quota_info = {"headers": quota_headers, "fetched_at": fetched_at.isoformat()}
    return response.json(), quota_info
