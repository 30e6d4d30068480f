from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from proppool.core.odds import validate_odds
from proppool.core.rules import validate_rule
from proppool.domain.enums import PropCategory, PropStatus, PropType, RuleKind
from proppool.domain.errors import CatalogError, SeedBlockedError
from proppool.domain.types import PropOption, Rule
from proppool.models import Pick, Player, Prop

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    key: str
    sort_order: int
    category: PropCategory
    question: str
    prop_type: PropType
    options: tuple[PropOption, ...]
    auto_resolve: bool = False
    rule: Rule | None = None
    resolution_criteria: str | None = None
    threshold: float | None = None
    stat_key: str | None = None
    player_name: str | None = None


# Name patterns matched case-insensitively against ESPN display names and play text.
PLAYER_ALIASES: dict[str, list[str]] = {
    "maye": ["drake maye", "d. maye"],
    "darnold": ["sam darnold", "s. darnold"],
    "walker": ["kenneth walker", "k. walker"],
    "stevenson": ["rhamondre stevenson", "r. stevenson"],
    "jsn": ["jaxon smith-njigba", "j. smith-njigba", "smith-njigba"],
    "diggs": ["stefon diggs", "s. diggs"],
    "kupp": ["cooper kupp", "c. kupp"],
    "henry": ["hunter henry", "h. henry"],
}


def _opts(*options: tuple[str, int, str]) -> tuple[PropOption, ...]:
    return tuple(PropOption(label=label, odds=odds, value=value) for label, odds, value in options)


def _aliases(mapping: Mapping[str, str]) -> dict[str, list[str]]:
    return {value: list(PLAYER_ALIASES[player]) for value, player in mapping.items()}


CURATED_CATALOG: tuple[CatalogEntry, ...] = (
    # game
    CatalogEntry(
        key="game_winner",
        sort_order=1,
        category=PropCategory.GAME,
        question="Who wins Super Bowl LX?",
        prop_type=PropType.BINARY,
        options=_opts(("Patriots", 195, "patriots"), ("Seahawks", -238, "seahawks")),
        auto_resolve=True,
        rule=Rule(RuleKind.OUTRIGHT_WINNER, {"home": "seahawks", "away": "patriots"}),
        resolution_criteria="Official NFL final score, including OT.",
    ),
    CatalogEntry(
        key="total_points",
        sort_order=2,
        category=PropCategory.GAME,
        question="Combined points O/U 45.5",
        prop_type=PropType.OVER_UNDER,
        options=_opts(("Over 45.5", -108, "over"), ("Under 45.5", -112, "under")),
        auto_resolve=True,
        rule=Rule(RuleKind.STAT_OVER_UNDER),
        resolution_criteria="Combined final score of both teams, including OT. Over = 46+, Under = 45 or fewer.",
        threshold=45.5,
        stat_key="total_points",
    ),
    CatalogEntry(
        key="margin_of_victory",
        sort_order=3,
        category=PropCategory.GAME,
        question="Winning team's margin of victory",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("1-6 pts", 200, "1_6"),
            ("7-12 pts", 250, "7_12"),
            ("13-18 pts", 350, "13_18"),
            ("19+ pts", 400, "19_plus"),
        ),
        auto_resolve=True,
        rule=Rule(
            RuleKind.MARGIN_BUCKET,
            {
                "buckets": [
                    {"min": 1, "max": 6, "value": "1_6"},
                    {"min": 7, "max": 12, "value": "7_12"},
                    {"min": 13, "max": 18, "value": "13_18"},
                    {"min": 19, "max": None, "value": "19_plus"},
                ]
            },
        ),
        resolution_criteria="Winner's score minus loser's score. Ranges are inclusive. OT counts.",
    ),
    CatalogEntry(
        key="first_to_score",
        sort_order=4,
        category=PropCategory.GAME,
        question="Which team scores first?",
        prop_type=PropType.BINARY,
        options=_opts(("Patriots", -105, "patriots_first"), ("Seahawks", -115, "seahawks_first")),
        auto_resolve=True,
        rule=Rule(RuleKind.FIRST_TO_SCORE, {"home": "seahawks_first", "away": "patriots_first"}),
        resolution_criteria="First team credited with points on the official play-by-play (TD, FG or safety).",
    ),
    CatalogEntry(
        key="falconing_alert",
        sort_order=5,
        category=PropCategory.GAME,
        question="Will a team lead by 14+ points and then lose?",
        prop_type=PropType.BINARY,
        options=_opts(("Yes", 350, "yes"), ("No", -500, "no")),
        auto_resolve=True,
        rule=Rule(RuleKind.BLOWN_LEAD, {"lead": 14}),
        resolution_criteria=(
            "YES if any team holds a lead of 14+ after a scoring play and goes on to lose, OT included. Otherwise NO."
        ),
    ),
    # player
    CatalogEntry(
        key="passing_yards",
        sort_order=6,
        category=PropCategory.PLAYER,
        question="Which QB has more passing yards?",
        prop_type=PropType.BINARY,
        options=_opts(("Drake Maye", -130, "maye"), ("Sam Darnold", 110, "darnold")),
        auto_resolve=True,
        rule=Rule(RuleKind.STAT_COMPARISON, {"stat": "pass_yds", "players": _aliases({"maye": "maye", "darnold": "darnold"})}),
        resolution_criteria="Official box score passing yards. If either QB does not play or they tie exactly, push.",
    ),
    CatalogEntry(
        key="rushing_yards",
        sort_order=7,
        category=PropCategory.PLAYER,
        question="Which RB has more rushing yards?",
        prop_type=PropType.BINARY,
        options=_opts(("Kenneth Walker", -160, "walker"), ("Rhamondre Stevenson", 140, "stevenson")),
        auto_resolve=True,
        rule=Rule(
            RuleKind.STAT_COMPARISON,
            {"stat": "rush_yds", "players": _aliases({"walker": "walker", "stevenson": "stevenson"})},
        ),
        resolution_criteria="Official box score rushing yards. If either RB does not play or they tie exactly, push.",
    ),
    CatalogEntry(
        key="leading_receiver",
        sort_order=8,
        category=PropCategory.PLAYER,
        question="Who leads the game in receiving yards?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("Jaxon Smith-Njigba", 200, "jsn"),
            ("Stefon Diggs", 400, "diggs"),
            ("Cooper Kupp", 500, "kupp"),
            ("Hunter Henry", 700, "henry"),
            ("Other", 300, "other"),
        ),
        auto_resolve=True,
        rule=Rule(
            RuleKind.LEADING_PERFORMER,
            {
                "stat": "rec_yds",
                "players": _aliases({"jsn": "jsn", "diggs": "diggs", "kupp": "kupp", "henry": "henry"}),
                "other": "other",
            },
        ),
        resolution_criteria=(
            'Most receiving yards in the box score. "Other" = any unlisted player. '
            "A named option tied for the lead with an unlisted player wins."
        ),
    ),
    CatalogEntry(
        key="first_td_scorer",
        sort_order=9,
        category=PropCategory.PLAYER,
        question="Who scores the first touchdown?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("Kenneth Walker", 350, "walker_td"),
            ("Rhamondre Stevenson", 850, "stevenson_td"),
            ("Jaxon Smith-Njigba", 550, "jsn_td"),
            ("Drake Maye", 1500, "maye_td"),
            ("Sam Darnold", 4000, "darnold_td"),
            ("Stefon Diggs", 1300, "diggs_td"),
            ("Cooper Kupp", 1200, "kupp_td"),
            ("Field (Other/DEF/ST)", 300, "field"),
        ),
        auto_resolve=True,
        rule=Rule(
            RuleKind.FIRST_TD_SCORER,
            {
                "players": _aliases(
                    {
                        "walker_td": "walker",
                        "stevenson_td": "stevenson",
                        "jsn_td": "jsn",
                        "maye_td": "maye",
                        "darnold_td": "darnold",
                        "diggs_td": "diggs",
                        "kupp_td": "kupp",
                    }
                ),
                "field": "field",
            },
        ),
        resolution_criteria='Player credited with the first TD. Passing TD = the receiver. Unlisted or DEF/ST = "Field".',
    ),
    CatalogEntry(
        key="super_bowl_mvp",
        sort_order=10,
        category=PropCategory.PLAYER,
        question="Who wins Super Bowl MVP?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("Drake Maye", 150, "maye_mvp"),
            ("Sam Darnold", 250, "darnold_mvp"),
            ("Kenneth Walker", 500, "walker_mvp"),
            ("Rhamondre Stevenson", 700, "stevenson_mvp"),
            ("Jaxon Smith-Njigba", 900, "jsn_mvp"),
            ("Other", 400, "other_mvp"),
        ),
        resolution_criteria='Official Pete Rozelle Trophy winner. "Other" = any unlisted player.',
    ),
    CatalogEntry(
        key="total_sacks",
        sort_order=11,
        category=PropCategory.PLAYER,
        question="Combined sacks O/U 4.5",
        prop_type=PropType.OVER_UNDER,
        options=_opts(("Over 4.5", -110, "over"), ("Under 4.5", -110, "under")),
        auto_resolve=True,
        rule=Rule(RuleKind.STAT_OVER_UNDER),
        resolution_criteria="Combined sacks by both teams from the official box score.",
        threshold=4.5,
        stat_key="total_sacks",
    ),
    CatalogEntry(
        key="total_tds",
        sort_order=12,
        category=PropCategory.PLAYER,
        question="Combined touchdowns O/U 4.5",
        prop_type=PropType.OVER_UNDER,
        options=_opts(("Over 4.5", -120, "over"), ("Under 4.5", 100, "under")),
        auto_resolve=True,
        rule=Rule(RuleKind.STAT_OVER_UNDER),
        resolution_criteria="Combined touchdowns by both teams, all phases included.",
        threshold=4.5,
        stat_key="total_tds",
    ),
    # fun
    CatalogEntry(
        key="coin_toss",
        sort_order=13,
        category=PropCategory.FUN,
        question="What is the result of the opening coin toss?",
        prop_type=PropType.BINARY,
        options=_opts(("Heads", -105, "heads"), ("Tails", -105, "tails")),
        resolution_criteria="Actual result of the opening coin toss as shown on the broadcast.",
    ),
    CatalogEntry(
        key="anthem_length",
        sort_order=14,
        category=PropCategory.FUN,
        question="National Anthem O/U 2:00 (minutes)",
        prop_type=PropType.OVER_UNDER,
        options=_opts(("Over 2:00", -140, "over"), ("Under 2:00", 120, "under")),
        resolution_criteria="Timed from the first sung note to the last sustained note. Over = 2:01 or longer.",
        threshold=120,
    ),
    CatalogEntry(
        key="gatorade_bath",
        sort_order=15,
        category=PropCategory.FUN,
        question="What color liquid is poured on the winning coach?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("Orange", 250, "orange"),
            ("Blue", 350, "blue"),
            ("Yellow", 400, "yellow"),
            ("Clear/Water", 300, "clear"),
            ("Red/Pink", 600, "red_pink"),
            ("None/Other", 800, "none_other"),
        ),
        resolution_criteria="Color visible on the broadcast. The first bath decides. Commissioner calls ambiguous colors.",
    ),
    CatalogEntry(
        key="first_score_type",
        sort_order=16,
        category=PropCategory.FUN,
        question="What type of play is the first score?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(
            ("Passing TD", 130, "passing_td"),
            ("Rushing TD", 300, "rushing_td"),
            ("Field Goal", 150, "field_goal"),
            ("Safety/Other", 2500, "safety_other"),
        ),
        auto_resolve=True,
        rule=Rule(
            RuleKind.FIRST_SCORE_TYPE,
            {"passing_td": "passing_td", "rushing_td": "rushing_td", "field_goal": "field_goal", "other": "safety_other"},
        ),
        resolution_criteria="Type of the first scoring play. Safety, defensive and special teams scores are Safety/Other.",
    ),
    CatalogEntry(
        key="any_interceptions",
        sort_order=17,
        category=PropCategory.FUN,
        question="Will there be an interception in the game?",
        prop_type=PropType.BINARY,
        options=_opts(("Yes (1+ INT)", 120, "yes"), ("No (0 INTs)", -140, "no")),
        auto_resolve=True,
        rule=Rule(RuleKind.OCCURRENCE, {"event": "interception"}),
        resolution_criteria="Yes = 1 or more interceptions by either team per the box score.",
    ),
    CatalogEntry(
        key="highest_scoring_quarter",
        sort_order=18,
        category=PropCategory.FUN,
        question="Which quarter has the most combined points?",
        prop_type=PropType.MULTI_CHOICE,
        options=_opts(("Q1", 350, "q1"), ("Q2", 150, "q2"), ("Q3", 300, "q3"), ("Q4", 200, "q4")),
        auto_resolve=True,
        rule=Rule(RuleKind.HIGHEST_SCORING_QUARTER),
        resolution_criteria="Quarter with the most combined points. OT excluded. Ties go to the earliest quarter.",
    ),
    CatalogEntry(
        key="the_doink",
        sort_order=19,
        category=PropCategory.FUN,
        question="Will a FG attempt hit the upright or crossbar?",
        prop_type=PropType.BINARY,
        options=_opts(("Yes", 250, "yes"), ("No", -350, "no")),
        resolution_criteria="Any FG attempt that visibly contacts the upright or crossbar, made or missed.",
    ),
    # degen
    CatalogEntry(
        key="overtime",
        sort_order=20,
        category=PropCategory.DEGEN,
        question="Will the game go to overtime?",
        prop_type=PropType.BINARY,
        options=_opts(("Yes", 800, "yes"), ("No", -1500, "no")),
        auto_resolve=True,
        rule=Rule(RuleKind.OVERTIME),
        resolution_criteria="YES if overtime is played, NO if the game ends in regulation.",
    ),
    CatalogEntry(
        key="safety_dance",
        sort_order=21,
        category=PropCategory.DEGEN,
        question="Will there be a safety?",
        prop_type=PropType.BINARY,
        options=_opts(("Yes", 900, "yes"), ("No", -1800, "no")),
        auto_resolve=True,
        rule=Rule(RuleKind.OCCURRENCE, {"event": "safety"}),
        resolution_criteria="YES if either team scores a safety.",
    ),
)


def validate_catalog(entries: Sequence[CatalogEntry]) -> None:
    seen_orders: set[int] = set()
    seen_keys: set[str] = set()
    for entry in entries:
        label = f"prop {entry.key!r}"
        if entry.sort_order in seen_orders:
            raise CatalogError(f"{label}: duplicate sort_order {entry.sort_order}")
        if entry.key in seen_keys:
            raise CatalogError(f"{label}: duplicate key")
        seen_orders.add(entry.sort_order)
        seen_keys.add(entry.key)

        if len(entry.options) < 2:
            raise CatalogError(f"{label}: at least two options are required")
        values = [option.value for option in entry.options]
        if len(set(values)) != len(values):
            raise CatalogError(f"{label}: option values must be unique")
        for option in entry.options:
            try:
                validate_odds(option.odds)
            except ValueError as exc:
                raise CatalogError(f"{label}: option {option.value!r} has invalid odds {option.odds!r}: {exc}") from exc

        if not entry.auto_resolve:
            continue
        if entry.rule is None:
            raise CatalogError(f"{label}: auto-resolved props must bind a rule")
        validate_rule(
            entry.rule,
            label=label,
            option_values=values,
            threshold=entry.threshold,
            stat_key=entry.stat_key,
            player_name=entry.player_name,
        )


def _prop_row(entry: CatalogEntry) -> Prop:
    return Prop(
        key=entry.key,
        sort_order=entry.sort_order,
        category=entry.category.value,
        question=entry.question,
        prop_type=entry.prop_type.value,
        options=[option.to_dict() for option in entry.options],
        status=PropStatus.PENDING.value,
        result=None,
        resolution_criteria=entry.resolution_criteria,
        auto_resolve=entry.auto_resolve,
        rule_kind=entry.rule.kind.value if entry.rule is not None else None,
        rule_params=dict(entry.rule.params) if entry.rule is not None else None,
        threshold=entry.threshold,
        stat_key=entry.stat_key,
        player_name=entry.player_name,
        current_value=None,
        live_stats=None,
    )


def seed_catalog(
    session: Session,
    entries: Sequence[CatalogEntry] = CURATED_CATALOG,
    *,
    force: bool = False,
) -> dict[str, object]:
    """Replace every prop with ``entries``. Destroys picks, so it refuses unless ``force``."""
    validate_catalog(entries)
    picks_count = session.scalar(select(func.count()).select_from(Pick)) or 0
    if picks_count and not force:
        raise SeedBlockedError(picks_count)

    try:
        session.execute(delete(Pick))
        session.execute(delete(Prop))
        session.execute(
            update(Player).values(
                total_points=0,
                max_possible=0,
                picks_count=0,
                correct_count=0,
                resolved_count=0,
                rank=None,
            )
        )
        session.add_all(_prop_row(entry) for entry in entries)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Seeded %s props (deleted %s picks)", len(entries), picks_count)
    return {"count": len(entries), "deleted_picks": picks_count}


def seed_if_empty(session: Session, entries: Sequence[CatalogEntry] = CURATED_CATALOG) -> dict[str, object]:
    existing = session.scalar(select(func.count()).select_from(Prop)) or 0
    if existing:
        return {"count": existing, "seeded": False}
    summary = seed_catalog(session, entries)
    return {**summary, "seeded": True}


# ── sportsbook odds payload ───────────────────────────────────────────

PREFERRED_BOOKMAKERS = ("draftkings", "fanduel", "betmgm", "betrivers")
MAX_MULTI_CHOICE_OPTIONS = 20

ODDS_MARKETS = (
    "h2h",
    "totals",
    "player_pass_yds",
    "player_pass_tds",
    "player_pass_interceptions",
    "player_pass_attempts",
    "player_pass_completions",
    "player_rush_yds",
    "player_rush_tds",
    "player_rush_attempts",
    "player_receptions",
    "player_reception_yds",
    "player_reception_tds",
    "player_sacks",
    "player_field_goals",
    "player_anytime_td",
    "player_1st_td",
)

_PLAYER_MARKETS: dict[str, tuple[str, str]] = {
    "player_pass_yds": ("pass_yds", "Passing Yards"),
    "player_pass_tds": ("pass_tds", "Passing TDs"),
    "player_pass_interceptions": ("interceptions", "Interceptions"),
    "player_pass_attempts": ("pass_attempts", "Pass Attempts"),
    "player_pass_completions": ("pass_completions", "Pass Completions"),
    "player_rush_yds": ("rush_yds", "Rushing Yards"),
    "player_rush_tds": ("rush_tds", "Rushing TDs"),
    "player_rush_attempts": ("rush_attempts", "Rush Attempts"),
    "player_receptions": ("receptions", "Receptions"),
    "player_reception_yds": ("rec_yds", "Receiving Yards"),
    "player_reception_tds": ("rec_tds", "Receiving TDs"),
    "player_sacks": ("sacks", "Sacks"),
    "player_field_goals": ("field_goals", "Field Goals"),
}

_MULTI_CHOICE_MARKETS = {
    "player_anytime_td": "Anytime TD Scorer",
    "player_1st_td": "First TD Scorer",
}

_CATEGORY_ORDER = {PropCategory.GAME: 0, PropCategory.PLAYER: 1, PropCategory.FUN: 2, PropCategory.DEGEN: 3}
_TYPE_ORDER = {PropType.BINARY: 0, PropType.OVER_UNDER: 1, PropType.MULTI_CHOICE: 2}


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def pick_bookmaker(bookmakers: Iterable[Mapping[str, Any]]) -> Mapping[str, Any] | None:
    books = list(bookmakers)
    for preferred in PREFERRED_BOOKMAKERS:
        for book in books:
            if book.get("key") == preferred:
                return book
    return books[0] if books else None


def _american(price: object) -> int:
    return int(round(float(price)))  # type: ignore[arg-type]


def _format_line(point: float) -> str:
    return f"{point:g}"


def _h2h_entry(outcomes: list[Mapping[str, Any]], home_team: str, away_team: str) -> CatalogEntry | None:
    options = tuple(
        PropOption(label=str(o["name"]), odds=_american(o["price"]), value=slugify(str(o["name"]))) for o in outcomes
    )
    sides = {str(o["name"]): slugify(str(o["name"])) for o in outcomes}
    if home_team not in sides or away_team not in sides:
        logger.warning("h2h outcomes %s do not name both teams (%s, %s); skipping", list(sides), home_team, away_team)
        return None
    return CatalogEntry(
        key="game_winner",
        sort_order=0,
        category=PropCategory.GAME,
        question="Game Winner",
        prop_type=PropType.BINARY,
        options=options,
        auto_resolve=True,
        rule=Rule(RuleKind.OUTRIGHT_WINNER, {"home": sides[home_team], "away": sides[away_team]}),
    )


def _over_under_entries(market_key: str, outcomes: list[Mapping[str, Any]]) -> list[CatalogEntry]:
    groups: dict[str, list[Mapping[str, Any]]] = {}
    for outcome in outcomes:
        groups.setdefault(str(outcome.get("description") or ""), []).append(outcome)

    entries: list[CatalogEntry] = []
    for player_name, group in groups.items():
        over = next((o for o in group if o.get("name") == "Over"), None)
        under = next((o for o in group if o.get("name") == "Under"), None)
        if over is None or under is None:
            continue
        point = over.get("point")
        if point is None:
            point = under.get("point")
        threshold = float(point or 0)
        line = _format_line(threshold)
        if market_key == "totals":
            stat_key, question, category, key = "total_points", "Total Points", PropCategory.GAME, "total_points"
            player = None
        else:
            stat_key, title = _PLAYER_MARKETS[market_key]
            question, category = f"{player_name} {title}", PropCategory.PLAYER
            key = f"{slugify(player_name)}_{stat_key}"
            player = player_name or None
        entries.append(
            CatalogEntry(
                key=key,
                sort_order=0,
                category=category,
                question=question,
                prop_type=PropType.OVER_UNDER,
                options=(
                    PropOption(label=f"Over {line}", odds=_american(over["price"]), value="over"),
                    PropOption(label=f"Under {line}", odds=_american(under["price"]), value="under"),
                ),
                auto_resolve=player is not None or market_key == "totals",
                rule=Rule(RuleKind.STAT_OVER_UNDER),
                threshold=threshold,
                stat_key=stat_key,
                player_name=player,
            )
        )
    return entries


def build_catalog_from_odds(event: Mapping[str, Any]) -> list[CatalogEntry]:
    """Catalog entries from one Odds API event-odds document, numbered 1..n."""
    bookmaker = pick_bookmaker(event.get("bookmakers") or [])
    if bookmaker is None:
        raise CatalogError("No bookmakers found in odds payload")

    home_team = str(event.get("home_team") or "")
    away_team = str(event.get("away_team") or "")
    entries: list[CatalogEntry] = []
    multi_choice: dict[str, dict[str, PropOption]] = {}

    for market in bookmaker.get("markets") or []:
        market_key = str(market.get("key") or "")
        outcomes = list(market.get("outcomes") or [])
        if market_key in _MULTI_CHOICE_MARKETS:
            bucket = multi_choice.setdefault(market_key, {})
            for outcome in outcomes:
                value = slugify(str(outcome["name"]))
                bucket.setdefault(
                    value, PropOption(label=str(outcome["name"]), odds=_american(outcome["price"]), value=value)
                )
        elif market_key == "h2h":
            entry = _h2h_entry(outcomes, home_team, away_team)
            if entry is not None:
                entries.append(entry)
        elif market_key == "totals" or market_key in _PLAYER_MARKETS:
            entries.extend(_over_under_entries(market_key, outcomes))
        else:
            logger.debug("Ignoring unsupported odds market %s", market_key)

    for market_key, options in multi_choice.items():
        entries.append(
            CatalogEntry(
                key=market_key.removeprefix("player_"),
                sort_order=0,
                category=PropCategory.PLAYER,
                question=_MULTI_CHOICE_MARKETS[market_key],
                prop_type=PropType.MULTI_CHOICE,
                options=tuple(options.values())[:MAX_MULTI_CHOICE_OPTIONS],
            )
        )

    entries.sort(key=lambda entry: (_CATEGORY_ORDER[entry.category], _TYPE_ORDER[entry.prop_type]))
    return [replace(entry, sort_order=index) for index, entry in enumerate(entries, start=1)]
