from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from proppool.core.odds import points_for
from proppool.domain.enums import PropStatus
from proppool.domain.types import PickRecord, PickScore, PlayerRecord, PlayerScore, PropRecord, Scoreboard


@dataclass
class _Tally:
    total_points: float = 0.0
    max_possible: float = 0.0
    picks_count: int = 0
    correct_count: int = 0
    resolved_count: int = 0


def rank_key(total_points: float, max_possible: float, player_id: int) -> tuple[float, float, int]:
    """Sort key for standings: total desc, then max possible desc, then player id asc."""
    return (-total_points, -max_possible, player_id)


def score_pick(pick: PickRecord, prop: PropRecord | None) -> tuple[PickScore, float | None]:
    """Score one pick. Returns the cache values and the option's point value (``None`` when stale)."""
    if prop is None:
        return PickScore(pick_id=pick.id, is_correct=None, points_earned=None), None
    option = prop.option(pick.selection)
    if option is None:
        if prop.status == PropStatus.RESOLVED:
            return PickScore(pick_id=pick.id, is_correct=False, points_earned=0.0), None
        return PickScore(pick_id=pick.id, is_correct=None, points_earned=None), None

    points = points_for(option.odds)
    if prop.status != PropStatus.RESOLVED:
        return PickScore(pick_id=pick.id, is_correct=None, points_earned=None), points
    is_correct = pick.selection == prop.result
    return PickScore(pick_id=pick.id, is_correct=is_correct, points_earned=points if is_correct else 0.0), points


def recompute_all(
    players: Sequence[PlayerRecord],
    picks: Sequence[PickRecord],
    props: Sequence[PropRecord],
) -> Scoreboard:
    """Derive every pick cache and player total from scratch.

    Nothing is carried over from a previous run, so any sequence of resolutions,
    corrections and undos converges to the same scoreboard. Picks are folded in
    (prop sort_order, prop id, pick id) order which keeps float sums identical
    regardless of the order rows were loaded in.
    """
    props_by_id = {prop.id: prop for prop in props}
    tallies = {player.id: _Tally() for player in players}

    def fold_order(pick: PickRecord) -> tuple[int, int, int]:
        prop = props_by_id.get(pick.prop_id)
        sort_order = prop.sort_order if prop is not None else 0
        return (sort_order, pick.prop_id, pick.id)

    pick_scores: list[PickScore] = []
    for pick in sorted(picks, key=fold_order):
        prop = props_by_id.get(pick.prop_id)
        pick_score, points = score_pick(pick, prop)
        pick_scores.append(pick_score)

        tally = tallies.get(pick.player_id)
        if tally is None or prop is None:
            continue
        tally.picks_count += 1
        if points is None:
            continue
        if prop.status == PropStatus.RESOLVED:
            tally.resolved_count += 1
            if pick_score.is_correct:
                tally.correct_count += 1
                tally.total_points += points
                tally.max_possible += points
        else:
            tally.max_possible += points

    ordered = sorted(
        players,
        key=lambda player: rank_key(tallies[player.id].total_points, tallies[player.id].max_possible, player.id),
    )
    player_scores = tuple(
        PlayerScore(
            player_id=player.id,
            name=player.name,
            total_points=tallies[player.id].total_points,
            max_possible=tallies[player.id].max_possible,
            picks_count=tallies[player.id].picks_count,
            correct_count=tallies[player.id].correct_count,
            resolved_count=tallies[player.id].resolved_count,
            rank=index,
        )
        for index, player in enumerate(ordered, start=1)
    )
    return Scoreboard(players=player_scores, picks=tuple(sorted(pick_scores, key=lambda item: item.pick_id)))
