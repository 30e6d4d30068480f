from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from proppool.db import get_db
from proppool.services.scoreboard import leaderboard, projected_leaderboard

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def confirmed(db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return leaderboard(db)


@router.get("/leaderboard/projected")
def projected(db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return projected_leaderboard(db)
