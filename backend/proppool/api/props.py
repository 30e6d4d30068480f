from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from proppool.db import get_db
from proppool.services.records import load_props, serialize_prop
from proppool.services.resolution import get_game_state, manual_props, serialize_game_state

router = APIRouter(tags=["props"])


@router.get("/props")
def props(db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return [serialize_prop(row) for row in load_props(db)]


@router.get("/props/manual")
def props_manual(db: Session = Depends(get_db)) -> list[dict[str, object]]:
    return manual_props(db)


@router.get("/game")
def game(db: Session = Depends(get_db)) -> dict[str, object]:
    state = serialize_game_state(get_game_state(db))
    db.commit()
    return state
