"""Advisory live state for props that are still being played out.

Nothing here writes committed state: the boundary may persist ``current_value``
and ``live_stats`` for display, but resolution and scoring never read them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from proppool.core.odds import points_for
from proppool.core.rules import find_player_line, player_stat, rule_param, stat_value, total_interceptions
from proppool.core.scoring import recompute_all
from proppool.domain.enums import PropStatus, RuleKind
from proppool.domain.types import (
    GameSnapshot,
    LiveUpdate,
    PickRecord,
    PlayerRecord,
    ProjectedEntry,
    PropRecord,
    Rule,
)


def _player_counters(rule: Rule, snapshot: GameSnapshot) -> dict[str, float]:
    stat = rule_param(rule, "stat")
    counters: dict[str, float] = {}
    named_lines: set[str] = set()
    for value, aliases in rule_param(rule, "players").items():
        line = find_player_line(snapshot, aliases)
        counters[value] = player_stat(line, stat) if line is not None else 0.0
        if line is not None:
            named_lines.add(line.name)

    other = rule_param(rule, "other")
    if rule.kind == RuleKind.LEADING_PERFORMER and other is not None:
        unnamed = [player_stat(line, stat) for line in snapshot.player_stats.values() if line.name not in named_lines]
        counters[other] = max(unnamed, default=0.0)
    return counters


def _live_stats(prop: PropRecord, snapshot: GameSnapshot) -> dict[str, float] | None:
    rule = prop.rule
    if rule is None:
        return None
    if rule.kind in {RuleKind.STAT_COMPARISON, RuleKind.LEADING_PERFORMER}:
        return _player_counters(rule, snapshot)
    if rule.kind == RuleKind.OUTRIGHT_WINNER:
        return {rule_param(rule, "home"): float(snapshot.home_score), rule_param(rule, "away"): float(snapshot.away_score)}
    if rule.kind == RuleKind.OCCURRENCE and rule_param(rule, "event") == "interception":
        seen = 1.0 if total_interceptions(snapshot) > 0 else 0.0
        return {rule_param(rule, "yes"): seen, rule_param(rule, "no"): 1.0 - seen}
    return None


def live_updates(props: Sequence[PropRecord], snapshot: GameSnapshot) -> list[LiveUpdate]:
    """Live values for every unresolved auto prop, plus its pending -> in_progress transition."""
    updates: list[LiveUpdate] = []
    for prop in sorted(props, key=lambda item: (item.sort_order, item.id)):
        if prop.status == PropStatus.RESOLVED or not prop.auto_resolve or prop.rule is None:
            continue
        status = prop.status
        if status == PropStatus.PENDING and snapshot.is_live:
            status = PropStatus.IN_PROGRESS
        current_value = stat_value(prop, snapshot) if prop.rule.kind == RuleKind.STAT_OVER_UNDER else None
        updates.append(
            LiveUpdate(
                prop_id=prop.id,
                current_value=current_value,
                live_stats=_live_stats(prop, snapshot),
                status=status,
            )
        )
    return updates


def trending_selection(prop: PropRecord) -> str | None:
    """Option the prop would settle on if the game ended now; ``None`` when ambiguous."""
    if prop.current_value is not None and prop.threshold is not None:
        over = rule_param(prop.rule, "over") if prop.rule is not None else "over"
        under = rule_param(prop.rule, "under") if prop.rule is not None else "under"
        return over if prop.current_value > prop.threshold else under

    if not prop.live_stats:
        return None
    stats: Mapping[str, float] = prop.live_stats
    best_value: float | None = None
    leaders: list[str] = []
    for option in prop.options:
        value = float(stats.get(option.value, 0.0))
        if best_value is None or value > best_value:
            best_value = value
            leaders = [option.value]
        elif value == best_value:
            leaders.append(option.value)
    if len(leaders) != 1:
        return None
    return leaders[0]


def project(
    players: Sequence[PlayerRecord],
    picks: Sequence[PickRecord],
    props: Sequence[PropRecord],
) -> list[ProjectedEntry]:
    scoreboard = recompute_all(players, picks, props)
    props_by_id = {prop.id: prop for prop in props}
    trending = {
        prop.id: trending_selection(prop) for prop in props if prop.status == PropStatus.IN_PROGRESS
    }

    bonus: dict[int, float] = {player.id: 0.0 for player in players}
    trending_picks = sorted(
        (pick for pick in picks if pick.prop_id in trending and pick.player_id in bonus),
        key=lambda pick: (props_by_id[pick.prop_id].sort_order, pick.prop_id, pick.id),
    )
    for pick in trending_picks:
        if trending[pick.prop_id] != pick.selection:
            continue
        option = props_by_id[pick.prop_id].option(pick.selection)
        if option is not None:
            bonus[pick.player_id] += points_for(option.odds)

    rows = [
        (score.player_id, score.name, score.total_points, score.total_points + bonus[score.player_id], score.max_possible)
        for score in scoreboard.players
    ]
    rows.sort(key=lambda row: (-row[3], -row[4], row[0]))
    return [
        ProjectedEntry(
            player_id=player_id,
            name=name,
            confirmed_points=confirmed,
            projected_points=projected,
            max_possible=max_possible,
            rank=index,
        )
        for index, (player_id, name, confirmed, projected, max_possible) in enumerate(rows, start=1)
    ]
