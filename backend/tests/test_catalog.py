from __future__ import annotations

from dataclasses import replace

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from proppool.domain.enums import PropCategory, PropType, RuleKind
from proppool.domain.errors import CatalogError, SeedBlockedError
from proppool.domain.types import PropOption, Rule
from proppool.models import Pick, Player, Prop
from proppool.services.catalog import (
    CURATED_CATALOG,
    MAX_MULTI_CHOICE_OPTIONS,
    build_catalog_from_odds,
    pick_bookmaker,
    seed_catalog,
    seed_if_empty,
    slugify,
    validate_catalog,
)


def test_curated_catalog_is_valid() -> None:
    validate_catalog(CURATED_CATALOG)
    assert len(CURATED_CATALOG) == 21
    assert [entry.sort_order for entry in CURATED_CATALOG] == list(range(1, 22))
    manual = {entry.key for entry in CURATED_CATALOG if not entry.auto_resolve}
    assert manual == {"super_bowl_mvp", "coin_toss", "anthem_length", "gatorade_bath", "the_doink"}


def test_validate_catalog_rejects_duplicates_and_bad_odds() -> None:
    first, second = CURATED_CATALOG[:2]
    with pytest.raises(CatalogError, match="duplicate sort_order"):
        validate_catalog([first, replace(second, sort_order=first.sort_order)])
    with pytest.raises(CatalogError, match="duplicate key"):
        validate_catalog([first, replace(second, key=first.key)])
    with pytest.raises(CatalogError, match="invalid odds"):
        validate_catalog([replace(first, options=(PropOption("A", 50, "a"), PropOption("B", -110, "b")))])
    with pytest.raises(CatalogError, match="two options"):
        validate_catalog([replace(first, options=(PropOption("A", 110, "a"),))])


def test_validate_catalog_requires_rules_for_auto_props() -> None:
    winner = CURATED_CATALOG[0]
    with pytest.raises(CatalogError, match="must bind a rule"):
        validate_catalog([replace(winner, rule=None)])
    with pytest.raises(CatalogError, match="unknown option"):
        validate_catalog([replace(winner, rule=Rule(RuleKind.OUTRIGHT_WINNER, {"home": "sea", "away": "patriots"}))])


def _count(session: Session, model: type) -> int:
    return session.scalar(select(func.count()).select_from(model)) or 0


def test_seed_refuses_to_destroy_picks_without_force(session: Session) -> None:
    seed_catalog(session)
    player = Player(name="Sam", total_points=5, max_possible=9, picks_count=1, rank=1)
    session.add(player)
    session.flush()
    session.add(Pick(player_id=player.id, prop_id=session.scalars(select(Prop.id)).first(), selection="seahawks"))
    session.commit()

    with pytest.raises(SeedBlockedError) as excinfo:
        seed_catalog(session)
    assert excinfo.value.picks_count == 1
    assert _count(session, Pick) == 1

    summary = seed_catalog(session, force=True)
    assert summary == {"count": 21, "deleted_picks": 1}
    assert _count(session, Pick) == 0
    assert _count(session, Prop) == 21
    session.refresh(player)
    assert (float(player.total_points), player.picks_count, player.rank) == (0.0, 0, None)


def test_seed_if_empty_only_seeds_once(session: Session) -> None:
    assert seed_if_empty(session)["seeded"] is True
    assert seed_if_empty(session) == {"count": 21, "seeded": False}


def test_invalid_catalog_leaves_existing_props(session: Session) -> None:
    seed_catalog(session)
    broken = [replace(CURATED_CATALOG[0], rule=None)]
    with pytest.raises(CatalogError):
        seed_catalog(session, broken, force=True)
    assert _count(session, Prop) == 21


def _odds_event() -> dict:
    touchdown_names = [f"Player {index}" for index in range(25)]
    return {
        "home_team": "Seattle Seahawks",
        "away_team": "New England Patriots",
        "bookmakers": [
            {"key": "bovada", "markets": []},
            {
                "key": "fanduel",
                "markets": [
                    {
                        "key": "player_anytime_td",
                        "outcomes": [{"name": name, "price": 150 + index} for index, name in enumerate(touchdown_names)],
                    },
                    {
                        "key": "player_pass_yds",
                        "outcomes": [
                            {"name": "Over", "description": "Drake Maye", "price": -115, "point": 224.5},
                            {"name": "Under", "description": "Drake Maye", "price": -105, "point": 224.5},
                        ],
                    },
                    {
                        "key": "totals",
                        "outcomes": [
                            {"name": "Over", "price": -108, "point": 45.5},
                            {"name": "Under", "price": -112, "point": 45.5},
                        ],
                    },
                    {
                        "key": "h2h",
                        "outcomes": [
                            {"name": "New England Patriots", "price": 195},
                            {"name": "Seattle Seahawks", "price": -238},
                        ],
                    },
                    {"key": "spreads", "outcomes": [{"name": "Seattle Seahawks", "price": -110, "point": -4.5}]},
                ],
            },
        ],
    }


def test_build_catalog_from_odds_orders_and_binds_rules() -> None:
    entries = build_catalog_from_odds(_odds_event())
    validate_catalog(entries)

    assert [entry.key for entry in entries] == ["game_winner", "total_points", "drake_maye_pass_yds", "anytime_td"]
    assert [entry.sort_order for entry in entries] == [1, 2, 3, 4]

    winner = entries[0]
    assert winner.rule == Rule(
        RuleKind.OUTRIGHT_WINNER, {"home": "seattle_seahawks", "away": "new_england_patriots"}
    )

    pass_yds = entries[2]
    assert (pass_yds.category, pass_yds.prop_type) == (PropCategory.PLAYER, PropType.OVER_UNDER)
    assert (pass_yds.stat_key, pass_yds.player_name, pass_yds.threshold) == ("pass_yds", "Drake Maye", 224.5)
    assert pass_yds.options[0].label == "Over 224.5"
    assert pass_yds.auto_resolve is True

    anytime = entries[3]
    assert anytime.auto_resolve is False
    assert len(anytime.options) == MAX_MULTI_CHOICE_OPTIONS


def test_build_catalog_from_odds_requires_bookmakers() -> None:
    with pytest.raises(CatalogError):
        build_catalog_from_odds({"bookmakers": []})


def test_bookmaker_preference_and_slugify() -> None:
    books = [{"key": "bovada"}, {"key": "betmgm"}, {"key": "fanduel"}]
    assert pick_bookmaker(books)["key"] == "fanduel"
    assert pick_bookmaker([{"key": "bovada"}])["key"] == "bovada"
    assert pick_bookmaker([]) is None
    assert slugify("Jaxon Smith-Njigba") == "jaxon_smith_njigba"
