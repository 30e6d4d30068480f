from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from proppool.domain.enums import PropCategory, PropStatus, PropType, RuleKind
from proppool.domain.types import PickRecord, PlayerRecord, PropOption, PropRecord, Rule
from proppool.models import Pick, Player, Prop


def to_decimal(value: float, places: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places))


def _to_float(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def prop_record(row: Prop) -> PropRecord:
    rule = None
    if row.rule_kind:
        rule = Rule(kind=RuleKind(row.rule_kind), params=dict(row.rule_params or {}))
    return PropRecord(
        id=row.id,
        key=row.key,
        sort_order=row.sort_order,
        question=row.question,
        prop_type=PropType(row.prop_type),
        options=tuple(PropOption.from_dict(option) for option in row.options or []),
        status=PropStatus(row.status),
        result=row.result,
        auto_resolve=row.auto_resolve,
        rule=rule,
        category=PropCategory(row.category),
        threshold=_to_float(row.threshold),
        stat_key=row.stat_key,
        player_name=row.player_name,
        current_value=_to_float(row.current_value),
        live_stats=dict(row.live_stats) if row.live_stats else None,
    )


def player_record(row: Player) -> PlayerRecord:
    return PlayerRecord(id=row.id, name=row.name)


def pick_record(row: Pick) -> PickRecord:
    return PickRecord(id=row.id, player_id=row.player_id, prop_id=row.prop_id, selection=row.selection)


def load_props(session: Session) -> list[Prop]:
    return list(session.execute(select(Prop).order_by(Prop.sort_order.asc(), Prop.id.asc())).scalars().all())


def load_players(session: Session) -> list[Player]:
    return list(session.execute(select(Player).order_by(Player.id.asc())).scalars().all())


def load_picks(session: Session) -> list[Pick]:
    return list(session.execute(select(Pick).order_by(Pick.id.asc())).scalars().all())


def load_state(session: Session) -> tuple[list[PlayerRecord], list[PickRecord], list[PropRecord]]:
    return (
        [player_record(row) for row in load_players(session)],
        [pick_record(row) for row in load_picks(session)],
        [prop_record(row) for row in load_props(session)],
    )


def serialize_prop(row: Prop) -> dict[str, object]:
    return {
        "id": row.id,
        "key": row.key,
        "sort_order": row.sort_order,
        "category": row.category,
        "question": row.question,
        "prop_type": row.prop_type,
        "options": row.options,
        "status": row.status,
        "result": row.result,
        "resolution_criteria": row.resolution_criteria,
        "auto_resolve": row.auto_resolve,
        "rule_kind": row.rule_kind,
        "threshold": _to_float(row.threshold),
        "stat_key": row.stat_key,
        "player_name": row.player_name,
        "current_value": _to_float(row.current_value),
        "live_stats": row.live_stats,
        "resolved_at": row.resolved_at,
    }


def serialize_player(row: Player) -> dict[str, object]:
    return {
        "id": row.id,
        "name": row.name,
        "total_points": float(row.total_points),
        "max_possible": float(row.max_possible),
        "picks_count": row.picks_count,
        "correct_count": row.correct_count,
        "resolved_count": row.resolved_count,
        "rank": row.rank,
        "created_at": row.created_at,
    }


def serialize_pick(row: Pick) -> dict[str, object]:
    return {
        "id": row.id,
        "player_id": row.player_id,
        "prop_id": row.prop_id,
        "selection": row.selection,
        "is_correct": row.is_correct,
        "points_earned": _to_float(row.points_earned),
        "created_at": row.created_at,
    }
