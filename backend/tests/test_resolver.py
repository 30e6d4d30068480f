from __future__ import annotations

from dataclasses import replace

from proppool.core.resolver import evaluate, manual_queue, max_leads, points_by_quarter, resolve, stalled_after_final
from proppool.domain.enums import GameStatus, PlayType, PropStatus, PropType, RuleKind
from proppool.domain.types import GameSnapshot, PlayerStatLine, PropOption, PropRecord, Rule, ScoringPlay


def _play(quarter: int, team: str, play_type: PlayType, home: int, away: int, description: str = "") -> ScoringPlay:
    return ScoringPlay(
        quarter=quarter,
        clock="5:00",
        team=team,
        play_type=play_type,
        description=description or f"{team} {play_type.value}",
        home_score=home,
        away_score=away,
    )


def _snap(
    home: int,
    away: int,
    *,
    status: GameStatus = GameStatus.FINAL,
    quarter: int = 4,
    plays: tuple[ScoringPlay, ...] = (),
    players: dict[str, PlayerStatLine] | None = None,
) -> GameSnapshot:
    return GameSnapshot(
        home_score=home,
        away_score=away,
        quarter=quarter,
        clock="0:00",
        status=status,
        home_team="SEA",
        away_team="NE",
        scoring_plays=plays,
        player_stats=players or {},
    )


def _result(prop: PropRecord, snapshot: GameSnapshot) -> str | None:
    outcome = evaluate(prop, snapshot)
    return outcome[0] if outcome is not None else None


def test_game_winner_maps_home_to_seahawks(catalog_props) -> None:
    prop = catalog_props["game_winner"]
    assert _result(prop, _snap(24, 17)) == "seahawks"
    assert _result(prop, _snap(17, 24)) == "patriots"
    assert _result(prop, _snap(24, 17, status=GameStatus.IN_PROGRESS)) is None
    assert _result(prop, _snap(20, 20)) is None


def test_total_points_37_is_under_45_5(catalog_props) -> None:
    prop = catalog_props["total_points"]
    assert _result(prop, _snap(20, 17)) == "under"
    assert _result(prop, _snap(28, 20)) == "over"
    assert _result(prop, _snap(20, 17, status=GameStatus.HALFTIME)) is None


def test_margin_buckets(catalog_props) -> None:
    prop = catalog_props["margin_of_victory"]
    assert _result(prop, _snap(20, 17)) == "1_6"
    assert _result(prop, _snap(38, 19)) == "19_plus"
    assert _result(prop, _snap(10, 22)) == "7_12"
    assert _result(prop, _snap(31, 13)) == "13_18"


def test_first_to_score_uses_first_play_team(catalog_props) -> None:
    prop = catalog_props["first_to_score"]
    plays = (_play(1, "NE", PlayType.FG, 0, 3), _play(1, "SEA", PlayType.TD, 7, 3))
    live = _snap(7, 3, status=GameStatus.IN_PROGRESS, quarter=1, plays=plays)
    assert _result(prop, live) == "patriots_first"
    assert _result(prop, _snap(0, 0, status=GameStatus.IN_PROGRESS, quarter=1)) is None


def test_blown_lead_of_14_counts_13_does_not(catalog_props) -> None:
    prop = catalog_props["falconing_alert"]
    fourteen = (
        _play(1, "SEA", PlayType.TD, 7, 0),
        _play(2, "SEA", PlayType.TD, 14, 0),
        _play(3, "NE", PlayType.TD, 14, 7),
        _play(4, "NE", PlayType.TD, 14, 14),
        _play(4, "NE", PlayType.FG, 14, 17),
    )
    assert max_leads(_snap(14, 17, plays=fourteen)) == (14, 3)
    assert _result(prop, _snap(14, 17, plays=fourteen)) == "yes"
    assert _result(prop, _snap(14, 17, status=GameStatus.IN_PROGRESS, plays=fourteen)) is None

    thirteen = (
        _play(1, "SEA", PlayType.TD, 7, 0),
        _play(2, "SEA", PlayType.FG, 10, 0),
        _play(2, "SEA", PlayType.FG, 13, 0),
        _play(3, "NE", PlayType.TD, 13, 7),
        _play(4, "NE", PlayType.TD, 13, 14),
    )
    assert _result(prop, _snap(13, 14, status=GameStatus.IN_PROGRESS, plays=thirteen)) is None
    assert _result(prop, _snap(13, 14, plays=thirteen)) == "no"


def test_stat_comparison_tie_or_missing_player_is_undecidable(catalog_props) -> None:
    prop = catalog_props["passing_yards"]
    maye = PlayerStatLine(name="Drake Maye", pass_yds=240)
    darnold = PlayerStatLine(name="Sam Darnold", pass_yds=275)
    assert _result(prop, _snap(24, 17, players={"1": maye, "2": darnold})) == "darnold"

    tied = replace(darnold, pass_yds=240)
    assert _result(prop, _snap(24, 17, players={"1": maye, "2": tied})) is None
    assert _result(prop, _snap(24, 17, players={"1": maye})) is None


def test_leading_performer_named_vs_other(catalog_props) -> None:
    prop = catalog_props["leading_receiver"]
    jsn = PlayerStatLine(name="Jaxon Smith-Njigba", rec_yds=112)
    diggs = PlayerStatLine(name="Stefon Diggs", rec_yds=80)
    stranger = PlayerStatLine(name="AJ Barner", rec_yds=150)

    assert _result(prop, _snap(24, 17, players={"1": jsn, "2": diggs})) == "jsn"
    assert _result(prop, _snap(24, 17, players={"1": jsn, "2": diggs, "3": stranger})) == "other"

    tie = replace(stranger, rec_yds=112)
    assert _result(prop, _snap(24, 17, players={"3": tie, "1": jsn})) == "jsn"


def test_leading_performer_without_other_option_stays_open() -> None:
    prop = PropRecord(
        id=1,
        key="leader",
        sort_order=1,
        question="Leading rusher",
        prop_type=PropType.MULTI_CHOICE,
        options=(PropOption("Kenneth Walker", 200, "walker"), PropOption("Field", -150, "field")),
        auto_resolve=True,
        rule=Rule(RuleKind.LEADING_PERFORMER, {"stat": "rush_yds", "players": {"walker": ["walker"]}}),
    )
    snapshot = _snap(24, 17, players={"1": PlayerStatLine(name="Somebody Else", rush_yds=90)})
    assert evaluate(prop, snapshot) is None


def test_first_td_scorer_credits_receiver_then_field(catalog_props) -> None:
    prop = catalog_props["first_td_scorer"]
    pass_td = _play(1, "SEA", PlayType.TD, 7, 0, "Sam Darnold pass to Jaxon Smith-Njigba for 22 yds for a TD")
    assert _result(prop, _snap(7, 0, status=GameStatus.IN_PROGRESS, quarter=1, plays=(pass_td,))) == "jsn_td"

    defensive = _play(2, "NE", PlayType.TD, 7, 7, "C. Gonzalez 40 Yd Interception Return")
    fg = _play(1, "NE", PlayType.FG, 0, 3)
    snapshot = _snap(7, 10, status=GameStatus.IN_PROGRESS, quarter=2, plays=(fg, defensive))
    assert _result(prop, snapshot) == "field"
    assert _result(prop, _snap(0, 3, status=GameStatus.IN_PROGRESS, quarter=1, plays=(fg,))) is None


def test_first_score_type(catalog_props) -> None:
    prop = catalog_props["first_score_type"]
    live = dict(status=GameStatus.IN_PROGRESS, quarter=1)
    run = _play(1, "SEA", PlayType.TD, 7, 0, "K. Walker 3 Yd Run")
    catch = _play(1, "SEA", PlayType.TD, 7, 0, "Darnold pass to Kupp")
    safety = _play(1, "NE", PlayType.SAFETY, 0, 2, "Safety")
    fg = _play(1, "NE", PlayType.FG, 0, 3)
    assert _result(prop, _snap(7, 0, plays=(run,), **live)) == "rushing_td"
    assert _result(prop, _snap(7, 0, plays=(catch,), **live)) == "passing_td"
    assert _result(prop, _snap(0, 2, plays=(safety,), **live)) == "safety_other"
    assert _result(prop, _snap(0, 3, plays=(fg,), **live)) == "field_goal"


def test_interception_occurrence(catalog_props) -> None:
    prop = catalog_props["any_interceptions"]
    picked = {"1": PlayerStatLine(name="Drake Maye", interceptions=1)}
    clean = {"1": PlayerStatLine(name="Drake Maye", interceptions=0)}
    assert _result(prop, _snap(3, 0, status=GameStatus.IN_PROGRESS, players=picked)) == "yes"
    assert _result(prop, _snap(3, 0, status=GameStatus.IN_PROGRESS, players=clean)) is None
    assert _result(prop, _snap(3, 0, players=clean)) == "no"


def test_safety_occurrence(catalog_props) -> None:
    prop = catalog_props["safety_dance"]
    safety = _play(3, "SEA", PlayType.SAFETY, 2, 0)
    assert _result(prop, _snap(2, 0, status=GameStatus.IN_PROGRESS, quarter=3, plays=(safety,))) == "yes"
    assert _result(prop, _snap(21, 17)) == "no"


def test_highest_scoring_quarter_breaks_ties_to_earliest(catalog_props) -> None:
    prop = catalog_props["highest_scoring_quarter"]
    plays = (
        _play(1, "SEA", PlayType.TD, 7, 0),
        _play(2, "NE", PlayType.TD, 7, 7),
        _play(3, "NE", PlayType.FG, 7, 10),
        _play(5, "SEA", PlayType.TD, 14, 10),
    )
    snapshot = _snap(14, 10, quarter=5, plays=plays)
    assert points_by_quarter(snapshot) == {1: 7, 2: 7, 3: 3, 4: 0}
    assert _result(prop, snapshot) == "q1"

    big_fourth = plays[:3] + (_play(4, "SEA", PlayType.TD, 14, 10), _play(4, "SEA", PlayType.FG, 17, 10))
    assert _result(prop, _snap(17, 10, plays=big_fourth)) == "q4"


def test_overtime(catalog_props) -> None:
    prop = catalog_props["overtime"]
    assert _result(prop, _snap(20, 20, status=GameStatus.IN_PROGRESS, quarter=5)) == "yes"
    assert _result(prop, _snap(20, 17)) == "no"
    assert _result(prop, _snap(20, 17, status=GameStatus.IN_PROGRESS, quarter=4)) is None


def test_resolve_skips_manual_and_resolved_props_and_is_idempotent(catalog_props) -> None:
    props = list(catalog_props.values())
    snapshot = _snap(24, 17, plays=(_play(1, "SEA", PlayType.TD, 7, 0, "K. Walker 2 Yd Run"),))

    first = resolve(props, snapshot)
    resolved_ids = {resolution.prop_id for resolution in first}
    assert catalog_props["game_winner"].id in resolved_ids
    assert catalog_props["super_bowl_mvp"].id not in resolved_ids
    assert [r.prop_id for r in first] == sorted(r.prop_id for r in first)

    by_id = {resolution.prop_id: resolution.result for resolution in first}
    applied = [
        replace(prop, status=PropStatus.RESOLVED, result=by_id[prop.id]) if prop.id in by_id else prop
        for prop in props
    ]
    assert resolve(applied, snapshot) == []
    assert resolve(list(reversed(props)), snapshot) == first


def test_result_outside_options_is_dropped(catalog_props, caplog) -> None:
    broken = replace(
        catalog_props["game_winner"],
        rule=Rule(RuleKind.OUTRIGHT_WINNER, {"home": "sea", "away": "patriots"}),
    )
    assert resolve([broken], _snap(24, 17)) == []
    assert "not an option" in caplog.text


def test_manual_queue_and_stalled_props(catalog_props) -> None:
    props = list(catalog_props.values())
    queue = [prop.key for prop in manual_queue(props)]
    assert queue == ["super_bowl_mvp", "coin_toss", "anthem_length", "gatorade_bath", "the_doink"]

    tied_qbs = {
        "1": PlayerStatLine(name="Drake Maye", pass_yds=200),
        "2": PlayerStatLine(name="Sam Darnold", pass_yds=200),
    }
    stalled = {prop.key for prop in stalled_after_final(props, _snap(24, 17, players=tied_qbs))}
    assert "passing_yards" in stalled
    assert "game_winner" not in stalled
    assert stalled_after_final(props, _snap(24, 17, status=GameStatus.IN_PROGRESS)) == []
