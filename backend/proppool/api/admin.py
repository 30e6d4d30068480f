from __future__ import annotations

import logging

import requests
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from proppool.api.deps import contest_errors, require_admin
from proppool.api.schemas import GameStatusRequest, PollRequest, ResolveRequest, SeedRequest, UndoRequest
from proppool.config import get_settings
from proppool.db import get_db
from proppool.integrations.odds_api import fetch_event_odds
from proppool.services.catalog import CURATED_CATALOG, build_catalog_from_odds, seed_catalog
from proppool.services.contest import delete_player, export_picks, reset_player_picks, view_player_picks
from proppool.services.pipeline import run_and_log
from proppool.services.resolution import resolve_prop, set_game_status, undo_resolution
from proppool.services.scoreboard import rescore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/resolve")
def resolve(body: ResolveRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return resolve_prop(db, body.prop_id, body.result)


@router.post("/undo")
def undo(body: UndoRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return undo_resolution(db, body.prop_id)


@router.post("/rescore")
def force_rescore(db: Session = Depends(get_db)) -> dict[str, object]:
    return rescore(db, reason="admin")


@router.post("/seed")
def seed(body: SeedRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    entries = CURATED_CATALOG
    if body.source == "odds":
        try:
            payload, quota = fetch_event_odds(body.event_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except requests.RequestException as exc:
            logger.exception("Odds API fetch failed")
            raise HTTPException(status_code=502, detail=f"Odds API error: {exc}") from exc
        logger.info("Odds API quota after catalog fetch: %s", quota["headers"])
        with contest_errors():
            entries = tuple(build_catalog_from_odds(payload))

    with contest_errors():
        summary = seed_catalog(db, entries, force=body.force)
    rescore(db, reason="seed")
    return {**summary, "source": body.source}


@router.get("/players/{player_id}/picks")
def player_picks(player_id: int, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return view_player_picks(db, player_id)


@router.post("/players/{player_id}/reset")
def reset_picks(player_id: int, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return reset_player_picks(db, player_id)


@router.delete("/players/{player_id}")
def remove_player(player_id: int, db: Session = Depends(get_db)) -> dict[str, object]:
    with contest_errors():
        return delete_player(db, player_id)


@router.get("/export")
def export(db: Session = Depends(get_db)) -> dict[str, object]:
    rows = export_picks(db)
    return {"count": len(rows), "picks": rows}


@router.post("/poll")
def poll(body: PollRequest | None = None, db: Session = Depends(get_db)) -> dict[str, object]:
    snapshot = body.snapshot if body is not None else None
    try:
        return run_and_log(db, get_settings(), snapshot_payload=snapshot)
    except requests.RequestException as exc:
        raise HTTPException(status_code=502, detail=f"ESPN fetch failed: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/game-status")
def game_status(body: GameStatusRequest, db: Session = Depends(get_db)) -> dict[str, object]:
    return set_game_status(db, body.status)
