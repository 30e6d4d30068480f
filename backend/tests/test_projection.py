from __future__ import annotations

from dataclasses import replace

import pytest

from proppool.core.odds import points_for
from proppool.core.projection import live_updates, project, trending_selection
from proppool.domain.enums import GameStatus, PlayType, PropStatus
from proppool.domain.types import GameSnapshot, PickRecord, PlayerRecord, PlayerStatLine, ScoringPlay


def _live(**overrides) -> GameSnapshot:
    values = dict(
        home_score=10,
        away_score=7,
        quarter=2,
        clock="3:30",
        status=GameStatus.IN_PROGRESS,
        home_team="SEA",
        away_team="NE",
        scoring_plays=(
            ScoringPlay(1, "9:00", "NE", PlayType.TD, "Stevenson 4 Yd Run", 0, 7),
            ScoringPlay(2, "6:00", "SEA", PlayType.TD, "Walker 1 Yd Run", 7, 7),
            ScoringPlay(2, "4:00", "SEA", PlayType.FG, "Myers 30 Yd FG", 10, 7),
        ),
        player_stats={
            "1": PlayerStatLine(name="Drake Maye", pass_yds=140),
            "2": PlayerStatLine(name="Sam Darnold", pass_yds=120, interceptions=1),
            "3": PlayerStatLine(name="Jaxon Smith-Njigba", rec_yds=60),
            "4": PlayerStatLine(name="AJ Barner", rec_yds=75),
        },
    )
    values.update(overrides)
    return GameSnapshot(**values)


def test_live_updates_move_pending_props_in_progress(catalog_props) -> None:
    updates = {update.prop_id: update for update in live_updates(list(catalog_props.values()), _live())}

    total = updates[catalog_props["total_points"].id]
    assert total.status == PropStatus.IN_PROGRESS
    assert total.current_value == 17.0

    qbs = updates[catalog_props["passing_yards"].id]
    assert qbs.live_stats == {"maye": 140.0, "darnold": 120.0}
    assert qbs.current_value is None

    receivers = updates[catalog_props["leading_receiver"].id]
    assert receivers.live_stats["jsn"] == 60.0
    assert receivers.live_stats["diggs"] == 0.0
    assert receivers.live_stats["other"] == 75.0

    assert updates[catalog_props["game_winner"].id].live_stats == {"seahawks": 10.0, "patriots": 7.0}
    assert updates[catalog_props["any_interceptions"].id].live_stats == {"yes": 1.0, "no": 0.0}
    assert catalog_props["coin_toss"].id not in updates


def test_pregame_snapshot_keeps_props_pending(catalog_props) -> None:
    snapshot = _live(status=GameStatus.PRE, quarter=0, home_score=0, away_score=0, scoring_plays=())
    for update in live_updates(list(catalog_props.values()), snapshot):
        assert update.status == PropStatus.PENDING


def test_trending_selection(catalog_props) -> None:
    total = replace(catalog_props["total_points"], current_value=47.0)
    assert trending_selection(total) == "over"
    assert trending_selection(replace(total, current_value=45.0)) == "under"

    qbs = catalog_props["passing_yards"]
    assert trending_selection(replace(qbs, live_stats={"maye": 140.0, "darnold": 120.0})) == "maye"
    assert trending_selection(replace(qbs, live_stats={"maye": 140.0, "darnold": 140.0})) is None
    assert trending_selection(qbs) is None


def test_project_adds_trending_points_without_touching_confirmed(catalog_props) -> None:
    winner = replace(catalog_props["game_winner"], status=PropStatus.RESOLVED, result="seahawks")
    total = replace(catalog_props["total_points"], status=PropStatus.IN_PROGRESS, current_value=47.0)
    qbs = replace(
        catalog_props["passing_yards"],
        status=PropStatus.IN_PROGRESS,
        live_stats={"maye": 140.0, "darnold": 140.0},
    )
    players = [PlayerRecord(1, "Sam"), PlayerRecord(2, "Adam")]
    picks = [
        PickRecord(1, 1, winner.id, "seahawks"),
        PickRecord(2, 1, total.id, "under"),
        PickRecord(3, 2, total.id, "over"),
        PickRecord(4, 2, qbs.id, "maye"),
    ]

    entries = project(players, picks, [winner, total, qbs])

    assert [entry.player_id for entry in entries] == [2, 1]
    adam, sam = entries
    assert sam.confirmed_points == pytest.approx(points_for(-238))
    assert sam.projected_points == sam.confirmed_points
    assert adam.confirmed_points == 0.0
    assert adam.projected_points == pytest.approx(points_for(-108))
    assert [entry.rank for entry in entries] == [1, 2]
