from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from proppool.api.deps import contest_errors, is_admin_key
from proppool.api.schemas import SubmitPicksRequest
from proppool.config import get_settings
from proppool.db import get_db
from proppool.services.contest import list_picks, submit_picks

router = APIRouter(tags=["picks"])


@router.get("/picks")
def picks(
    player_id: int | None = Query(None),
    key: str | None = Query(None),
    x_admin_key: str | None = Header(None),
    db: Session = Depends(get_db),
) -> list[dict[str, object]]:
    with contest_errors():
        return list_picks(db, get_settings(), player_id, is_admin=is_admin_key(x_admin_key or key))


@router.post("/picks")
def save_picks(body: SubmitPicksRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return submit_picks(
            db,
            get_settings(),
            body.player_id,
            [(pick.prop_id, pick.selection) for pick in body.picks],
            lock_in=body.lock_in,
        )
