import pytest

from proppool.core.odds import (
    format_odds,
    format_points,
    odds_for_points,
    points_for,
    quarter_label,
    validate_odds,
)


def test_points_for_known_fixtures() -> None:
    assert points_for(-110) == pytest.approx(1.9090909, abs=1e-6)
    assert points_for(150) == pytest.approx(2.5)
    assert points_for(300) == pytest.approx(4.0)
    assert points_for(-300) == pytest.approx(1.3333333, abs=1e-6)
    assert points_for(100) == pytest.approx(2.0)
    assert points_for(-100) == pytest.approx(2.0)


def test_favorite_game_winner_pays_about_1_42() -> None:
    assert format_points(points_for(-238)) == "1.42"


def test_points_are_monotonic_in_odds() -> None:
    ladder = [-1800, -500, -238, -140, -110, -100, 100, 120, 195, 400, 900, 4000]
    values = [points_for(odds) for odds in ladder]
    assert values == sorted(values)
    assert all(value > 1.0 for value in values)


def test_points_for_rejects_zero() -> None:
    with pytest.raises(ValueError):
        points_for(0)


def test_odds_for_points_inverts_points_for() -> None:
    for american in [-300, -238, -110, 100, 150, 195, 300]:
        assert odds_for_points(points_for(american)) == pytest.approx(american, abs=1)
    with pytest.raises(ValueError):
        odds_for_points(1.0)


@pytest.mark.parametrize("bad", [0, 50, -99, 1.5, True, "110"])
def test_validate_odds_rejects_bad_values(bad: object) -> None:
    with pytest.raises(ValueError):
        validate_odds(bad)


def test_formatting_helpers() -> None:
    assert format_odds(150) == "+150"
    assert format_odds(-110) == "-110"
    assert format_points(2.5) == "2.50"
    assert quarter_label(0) == "PRE"
    assert quarter_label(3) == "Q3"
    assert quarter_label(5) == "OT"
