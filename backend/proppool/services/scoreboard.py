from __future__ import annotations

import logging
import threading

from sqlalchemy import select
from sqlalchemy.orm import Session

from proppool.core.projection import project
from proppool.core.scoring import recompute_all
from proppool.models import Player
from proppool.services.events import SCOREBOARD_UPDATED, publish
from proppool.services.records import (
    load_picks,
    load_players,
    load_props,
    load_state,
    pick_record,
    player_record,
    prop_record,
    to_decimal,
)

logger = logging.getLogger(__name__)

_rescore_lock = threading.Lock()


def rescore(session: Session, *, reason: str = "manual") -> dict[str, object]:
    """Recompute every pick cache and player total, then commit.

    Pending changes already staged on ``session`` (a resolution, an undo, a
    deleted player) are committed together with the new scores.
    """
    with _rescore_lock:
        try:
            session.flush()
            player_rows = load_players(session)
            pick_rows = load_picks(session)
            prop_rows = load_props(session)
            scoreboard = recompute_all(
                [player_record(row) for row in player_rows],
                [pick_record(row) for row in pick_rows],
                [prop_record(row) for row in prop_rows],
            )

            picks_by_id = {row.id: row for row in pick_rows}
            for pick_score in scoreboard.picks:
                row = picks_by_id[pick_score.pick_id]
                row.is_correct = pick_score.is_correct
                row.points_earned = (
                    to_decimal(pick_score.points_earned, "0.000001") if pick_score.points_earned is not None else None
                )

            players_by_id = {row.id: row for row in player_rows}
            for player_score in scoreboard.players:
                row = players_by_id[player_score.player_id]
                row.total_points = to_decimal(player_score.total_points, "0.000001")
                row.max_possible = to_decimal(player_score.max_possible, "0.000001")
                row.picks_count = player_score.picks_count
                row.correct_count = player_score.correct_count
                row.resolved_count = player_score.resolved_count
                row.rank = player_score.rank
            session.commit()
        except Exception:
            session.rollback()
            raise

    summary = {
        "reason": reason,
        "players": len(scoreboard.players),
        "picks": len(scoreboard.picks),
        "leader_id": scoreboard.players[0].player_id if scoreboard.players else None,
    }
    logger.info("Rescored %s players / %s picks (%s)", summary["players"], summary["picks"], reason)
    publish(SCOREBOARD_UPDATED, summary)
    return summary


def leaderboard(session: Session) -> list[dict[str, object]]:
    rows = session.execute(
        select(Player).order_by(Player.rank.is_(None), Player.rank.asc(), Player.id.asc())
    ).scalars().all()
    return [
        {
            "player_id": row.id,
            "name": row.name,
            "rank": row.rank,
            "total_points": float(row.total_points),
            "max_possible": float(row.max_possible),
            "picks_count": row.picks_count,
            "correct_count": row.correct_count,
            "resolved_count": row.resolved_count,
        }
        for row in rows
    ]


def projected_leaderboard(session: Session) -> list[dict[str, object]]:
    entries = project(*load_state(session))
    return [
        {
            "player_id": entry.player_id,
            "name": entry.name,
            "rank": entry.rank,
            "confirmed_points": entry.confirmed_points,
            "projected_points": entry.projected_points,
            "max_possible": entry.max_possible,
        }
        for entry in entries
    ]
