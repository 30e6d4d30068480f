from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from proppool.api.deps import client_key, contest_errors, get_join_limiter
from proppool.api.schemas import JoinRequest
from proppool.config import get_settings
from proppool.db import get_db
from proppool.services.contest import join_player, list_players
from proppool.services.rate_limit import JoinRateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["players"])


@router.get("/players")
def players(db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return list_players(db)


@router.post("/players")
def join(
    body: JoinRequest,
    request: Request,
    limiter: JoinRateLimiter = Depends(get_join_limiter),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    client = client_key(request, get_settings().trust_proxy_headers)
    if not limiter.allow(client):
        logger.warning("Join rate limit hit for %s", client)
        raise HTTPException(status_code=429, detail="Too many attempts. Try again in a minute.")
    with contest_errors():
        return join_player(db, get_settings(), body.name)
