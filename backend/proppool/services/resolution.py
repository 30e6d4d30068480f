from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from proppool.core.odds import quarter_label
from proppool.core.projection import live_updates
from proppool.core.resolver import manual_queue, resolve, stalled_after_final
from proppool.domain.enums import GameStatus, PropStatus
from proppool.domain.errors import InvalidResultError, NotFoundError
from proppool.domain.types import GameSnapshot
from proppool.models import GameState, Prop
from proppool.services.records import load_props, prop_record, serialize_prop, to_decimal
from proppool.services.scoreboard import rescore

logger = logging.getLogger(__name__)

GAME_STATE_ID = 1


def _get_prop(session: Session, prop_id: int) -> Prop:
    prop = session.get(Prop, prop_id)
    if prop is None:
        raise NotFoundError(f"Prop {prop_id} not found")
    return prop


def get_game_state(session: Session) -> GameState:
    state = session.get(GameState, GAME_STATE_ID)
    if state is None:
        state = GameState(id=GAME_STATE_ID)
        session.add(state)
        session.flush()
    return state


def serialize_game_state(state: GameState) -> dict[str, object]:
    return {
        "home_team": state.home_team,
        "away_team": state.away_team,
        "home_score": state.home_score,
        "away_score": state.away_score,
        "quarter": state.quarter,
        "period": quarter_label(state.quarter),
        "clock": state.clock,
        "status": state.status,
        "last_play": state.last_play,
        "updated_at": state.updated_at,
    }


def resolve_prop(session: Session, prop_id: int, result: str) -> dict[str, object]:
    """Manually settle (or correct) a prop, then rescore."""
    prop = _get_prop(session, prop_id)
    if not any(option.get("value") == result for option in prop.options or []):
        raise InvalidResultError(f"{result!r} is not an option of prop {prop_id}")
    previous = prop.result
    prop.status = PropStatus.RESOLVED.value
    prop.result = result
    prop.resolved_at = datetime.now(timezone.utc)
    rescore(session, reason=f"resolve:{prop.key}")
    logger.info("Prop %s resolved manually to %s (was %s)", prop.key, result, previous)
    return {"success": True, "prop": serialize_prop(prop), "previous_result": previous}


def undo_resolution(session: Session, prop_id: int) -> dict[str, object]:
    prop = _get_prop(session, prop_id)
    previous = prop.result
    prop.status = PropStatus.PENDING.value
    prop.result = None
    prop.resolved_at = None
    rescore(session, reason=f"undo:{prop.key}")
    logger.info("Prop %s resolution undone (was %s)", prop.key, previous)
    return {"success": True, "prop": serialize_prop(prop), "previous_result": previous}


def manual_props(session: Session) -> list[dict[str, object]]:
    rows = {row.id: row for row in load_props(session)}
    queue = manual_queue([prop_record(row) for row in rows.values()])
    return [serialize_prop(rows[prop.id]) for prop in queue]


def _record_game_state(session: Session, snapshot: GameSnapshot) -> None:
    state = get_game_state(session)
    state.home_team = snapshot.home_team
    state.away_team = snapshot.away_team
    state.home_score = snapshot.home_score
    state.away_score = snapshot.away_score
    state.quarter = snapshot.quarter
    state.clock = snapshot.clock
    state.status = snapshot.status.value
    state.last_play = snapshot.last_play


def set_game_status(session: Session, status: GameStatus) -> dict[str, object]:
    state = get_game_state(session)
    state.status = status.value
    session.commit()
    return serialize_game_state(state)


def apply_snapshot(session: Session, snapshot: GameSnapshot) -> dict[str, object]:
    """Persist live values and automatic resolutions for one snapshot, then rescore.

    Applying the same snapshot twice is a no-op the second time: resolved
    props are skipped by the resolver.
    """
    _record_game_state(session, snapshot)
    rows = {row.id: row for row in load_props(session)}
    records = [prop_record(row) for row in rows.values()]

    updated = 0
    for update in live_updates(records, snapshot):
        row = rows[update.prop_id]
        row.current_value = to_decimal(update.current_value, "0.001") if update.current_value is not None else None
        row.live_stats = dict(update.live_stats) if update.live_stats is not None else None
        if row.status != update.status.value:
            row.status = update.status.value
        updated += 1

    resolutions = resolve(records, snapshot)
    now = datetime.now(timezone.utc)
    for resolution in resolutions:
        row = rows[resolution.prop_id]
        row.status = PropStatus.RESOLVED.value
        row.result = resolution.result
        row.resolved_at = now
        logger.info("Auto-resolved %s -> %s (%s)", row.key, resolution.result, resolution.reason)

    stalled = [prop.key for prop in stalled_after_final(records, snapshot)]
    if stalled:
        logger.warning("Final snapshot left %s auto props unresolved: %s", len(stalled), ", ".join(stalled))

    if resolutions:
        rescore(session, reason="poll")
    else:
        session.commit()

    return {
        "status": snapshot.status.value,
        "score": f"{snapshot.away_score}-{snapshot.home_score}",
        "quarter": snapshot.quarter,
        "live_updates": updated,
        "resolved": [
            {"prop_id": r.prop_id, "key": rows[r.prop_id].key, "result": r.result, "reason": r.reason}
            for r in resolutions
        ],
        "stalled": stalled,
    }
