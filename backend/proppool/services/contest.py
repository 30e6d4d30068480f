from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from proppool.config import Settings
from proppool.core.odds import format_points, points_for
from proppool.domain.errors import InvalidPickError, NotFoundError, PicksLockedError, UnknownPlayerNameError
from proppool.domain.types import PropOption
from proppool.models import Pick, Player, Prop
from proppool.services.records import load_props, serialize_pick, serialize_player
from proppool.services.scoreboard import rescore

logger = logging.getLogger(__name__)


def canonical_name(name: str, allowed: Iterable[str]) -> str:
    wanted = name.strip().lower()
    if not wanted:
        raise UnknownPlayerNameError("Name is required")
    for candidate in allowed:
        if candidate.lower() == wanted:
            return candidate
    raise UnknownPlayerNameError("Name not recognized. Please pick from the list.")


def join_player(session: Session, settings: Settings, name: str) -> dict[str, object]:
    """Create the player for an allow-listed name, or return the existing one."""
    canonical = canonical_name(name, settings.allowed_player_names)
    existing = session.execute(
        select(Player).where(func.lower(Player.name) == canonical.lower())
    ).scalar_one_or_none()
    if existing is not None:
        return {"id": existing.id, "name": existing.name, "is_returning": True, "picks_count": existing.picks_count}

    player = Player(name=canonical)
    session.add(player)
    try:
        session.commit()
    except IntegrityError:
        # Concurrent join for the same name.
        session.rollback()
        existing = session.execute(select(Player).where(Player.name == canonical)).scalar_one()
        return {"id": existing.id, "name": existing.name, "is_returning": True, "picks_count": existing.picks_count}
    logger.info("Player %s joined (id=%s)", player.name, player.id)
    return {"id": player.id, "name": player.name, "is_returning": False, "picks_count": 0}


def list_players(session: Session) -> list[dict[str, object]]:
    rows = session.execute(
        select(Player).order_by(Player.rank.is_(None), Player.rank.asc(), Player.name.asc())
    ).scalars().all()
    return [serialize_player(row) for row in rows]


def _get_player(session: Session, player_id: int) -> Player:
    player = session.get(Player, player_id)
    if player is None:
        raise NotFoundError(f"Player {player_id} not found")
    return player


def _validate_selections(props_by_id: Mapping[int, Prop], picks: list[tuple[int, str]]) -> None:
    for prop_id, selection in picks:
        prop = props_by_id.get(prop_id)
        if prop is None:
            raise InvalidPickError(f"Prop {prop_id} not found")
        if not any(option.get("value") == selection for option in prop.options or []):
            raise InvalidPickError(f"Invalid selection {selection!r} for prop {prop_id}")


def _upsert_pick(session: Session, player_id: int, prop_id: int, selection: str) -> None:
    existing = session.execute(
        select(Pick).where(Pick.player_id == player_id, Pick.prop_id == prop_id)
    ).scalar_one_or_none()
    if existing is not None:
        existing.selection = selection
        return
    try:
        with session.begin_nested():
            session.add(Pick(player_id=player_id, prop_id=prop_id, selection=selection))
    except IntegrityError:
        # Another request inserted the same (player, prop) first; last write wins.
        session.execute(
            select(Pick).where(Pick.player_id == player_id, Pick.prop_id == prop_id)
        ).scalar_one().selection = selection


def submit_picks(
    session: Session,
    settings: Settings,
    player_id: int,
    picks: list[tuple[int, str]],
    *,
    lock_in: bool = False,
    now: datetime | None = None,
) -> dict[str, object]:
    if settings.picks_locked(now):
        raise PicksLockedError("Picks are locked")
    _get_player(session, player_id)

    props_by_id = {row.id: row for row in load_props(session)}
    _validate_selections(props_by_id, picks)
    if lock_in:
        submitted = {prop_id for prop_id, _selection in picks}
        if len(submitted) < len(props_by_id):
            raise InvalidPickError(
                f"Must pick all {len(props_by_id)} props before locking in. You have {len(submitted)}."
            )

    # Duplicate prop ids in one submission: the last one wins.
    latest = dict(picks)
    for prop_id, selection in latest.items():
        _upsert_pick(session, player_id, prop_id, selection)

    # A changed selection can move totals on an already-resolved prop.
    rescore(session, reason="picks")
    player = _get_player(session, player_id)
    return {"success": True, "saved": len(latest), "picks_count": player.picks_count}


def list_picks(
    session: Session,
    settings: Settings,
    player_id: int | None,
    *,
    is_admin: bool = False,
    now: datetime | None = None,
) -> list[dict[str, object]]:
    if player_id is None and not is_admin and not settings.picks_locked(now):
        raise PicksLockedError("player_id is required before lock")
    stmt = select(Pick).order_by(Pick.player_id.asc(), Pick.prop_id.asc())
    if player_id is not None:
        stmt = stmt.where(Pick.player_id == player_id)
    return [serialize_pick(row) for row in session.execute(stmt).scalars().all()]


def _option(prop: Prop | None, selection: str) -> PropOption | None:
    if prop is None:
        return None
    for raw in prop.options or []:
        if raw.get("value") == selection:
            return PropOption.from_dict(raw)
    return None


def view_player_picks(session: Session, player_id: int) -> dict[str, object]:
    player = _get_player(session, player_id)
    props_by_id = {row.id: row for row in load_props(session)}
    picks = session.execute(select(Pick).where(Pick.player_id == player_id)).scalars().all()

    def order(pick: Pick) -> tuple[int, int]:
        prop = props_by_id.get(pick.prop_id)
        return (prop.sort_order if prop is not None else 0, pick.id)

    enriched = []
    for pick in sorted(picks, key=order):
        prop = props_by_id.get(pick.prop_id)
        option = _option(prop, pick.selection)
        enriched.append(
            {
                "pick_id": pick.id,
                "prop_id": pick.prop_id,
                "question": prop.question if prop is not None else "Unknown",
                "category": prop.category if prop is not None else "unknown",
                "selection_value": pick.selection,
                "selection_label": option.label if option is not None else pick.selection,
                "odds": option.odds if option is not None else 0,
                "point_value": points_for(option.odds) if option is not None else 0.0,
                "is_correct": pick.is_correct,
                "points_earned": float(pick.points_earned) if pick.points_earned is not None else None,
                "prop_status": prop.status if prop is not None else "unknown",
                "prop_result": prop.result if prop is not None else None,
            }
        )
    return {"player": serialize_player(player), "picks": enriched, "total_picks": len(enriched)}


def reset_player_picks(session: Session, player_id: int) -> dict[str, object]:
    _get_player(session, player_id)
    deleted = session.execute(delete(Pick).where(Pick.player_id == player_id)).rowcount
    rescore(session, reason="reset_picks")
    logger.info("Reset %s picks for player %s", deleted, player_id)
    return {"success": True, "action": "reset_picks", "player_id": player_id, "deleted_picks": deleted}


def delete_player(session: Session, player_id: int) -> dict[str, object]:
    player = _get_player(session, player_id)
    session.execute(delete(Pick).where(Pick.player_id == player_id))
    session.delete(player)
    rescore(session, reason="delete_player")
    logger.info("Deleted player %s", player_id)
    return {"success": True, "action": "delete_player", "player_id": player_id}


def export_picks(session: Session) -> list[dict[str, object]]:
    """Flat pick rows for backing up to a spreadsheet."""
    names = {row.id: row.name for row in session.execute(select(Player)).scalars().all()}
    props_by_id = {row.id: row for row in load_props(session)}
    rows = session.execute(select(Pick).order_by(Pick.created_at.asc(), Pick.id.asc())).scalars().all()

    exported = []
    for pick in rows:
        prop = props_by_id.get(pick.prop_id)
        option = _option(prop, pick.selection)
        points = format_points(points_for(option.odds)) if option is not None else "0"
        if prop is None or prop.result is None:
            correct = ""
        else:
            correct = "YES" if prop.result == pick.selection else "NO"
        exported.append(
            {
                "player": names.get(pick.player_id, str(pick.player_id)),
                "question": prop.question if prop is not None else str(pick.prop_id),
                "selection": option.label if option is not None else pick.selection,
                "points_if_correct": points,
                "correct": correct,
                "points_earned": points if correct == "YES" else ("0" if correct == "NO" else ""),
            }
        )
    return exported
