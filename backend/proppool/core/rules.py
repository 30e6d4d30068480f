"""Rule kinds, their parameters, and the stat lookups shared by resolution and projection.

Every auto-resolvable prop is bound to one :class:`Rule`. The parameters each kind
accepts (all JSON-serialisable, option values refer to the bound prop):

``outright_winner`` / ``first_to_score``
    ``home``, ``away``: option values for each side.
``stat_over_under``
    ``over``, ``under`` (default ``"over"``/``"under"``). Needs the prop's
    ``threshold`` and ``stat_key``; player stat keys also need ``player_name``.
``margin_bucket``
    ``buckets``: ascending ``{"min", "max", "value"}`` ranges, contiguous from 1,
    last one open-ended (``max`` is ``None``).
``blown_lead``
    ``lead`` (default 14), ``yes``, ``no``.
``stat_comparison``
    ``stat``: a player stat field, ``players``: exactly two option values mapped
    to name aliases.
``leading_performer``
    ``stat``, ``players`` (option value -> aliases), optional ``other``.
``first_td_scorer``
    ``players`` (option value -> aliases), optional ``field``.
``first_score_type``
    ``passing_td``, ``rushing_td``, ``field_goal``, ``other``.
``occurrence``
    ``event`` (one of :data:`OCCURRENCE_EVENTS`), ``yes``, ``no``.
``highest_scoring_quarter``
    ``quarters``: four option values for Q1..Q4.
``overtime``
    ``yes``, ``no``.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import fields
from typing import Any

from proppool.domain.enums import PlayType, RuleKind
from proppool.domain.errors import CatalogError
from proppool.domain.types import GameSnapshot, PlayerStatLine, PropRecord, Rule

PLAYER_STAT_FIELDS = frozenset(f.name for f in fields(PlayerStatLine) if f.name not in {"name", "team"})
GAME_STAT_KEYS = frozenset(
    {"total_points", "total_sacks", "total_tds", "total_interceptions", "total_field_goals"}
)
OCCURRENCE_EVENTS = frozenset({"interception", "safety", "touchdown", "field_goal"})
DEFAULT_BLOWN_LEAD = 14

_DEFAULTS: dict[RuleKind, dict[str, Any]] = {
    RuleKind.STAT_OVER_UNDER: {"over": "over", "under": "under"},
    RuleKind.BLOWN_LEAD: {"lead": DEFAULT_BLOWN_LEAD, "yes": "yes", "no": "no"},
    RuleKind.OCCURRENCE: {"yes": "yes", "no": "no"},
    RuleKind.OVERTIME: {"yes": "yes", "no": "no"},
    RuleKind.HIGHEST_SCORING_QUARTER: {"quarters": ["q1", "q2", "q3", "q4"]},
    RuleKind.LEADING_PERFORMER: {"other": None},
    RuleKind.FIRST_TD_SCORER: {"field": None},
}


def rule_param(rule: Rule, name: str) -> Any:
    if name in rule.params:
        return rule.params[name]
    return _DEFAULTS.get(rule.kind, {}).get(name)


# ── stat lookups ──────────────────────────────────────────────────────


def matches_alias(text: str, aliases: Iterable[str]) -> bool:
    haystack = text.lower()
    return any(alias.lower() in haystack for alias in aliases if alias)


def find_player_line(snapshot: GameSnapshot, aliases: Iterable[str]) -> PlayerStatLine | None:
    patterns = [alias for alias in aliases if alias]
    for line in snapshot.player_stats.values():
        if matches_alias(line.name, patterns):
            return line
    return None


def player_stat(line: PlayerStatLine, stat: str) -> float:
    return float(getattr(line, stat))


def total_interceptions(snapshot: GameSnapshot) -> int:
    return sum(line.interceptions for line in snapshot.player_stats.values())


def count_plays(snapshot: GameSnapshot, play_type: PlayType) -> int:
    return sum(1 for play in snapshot.scoring_plays if play.play_type == play_type)


def game_stat(snapshot: GameSnapshot, stat_key: str) -> float | None:
    if stat_key == "total_points":
        return float(snapshot.home_score + snapshot.away_score)
    if stat_key == "total_sacks":
        return float(snapshot.home_stats.sacks + snapshot.away_stats.sacks)
    if stat_key == "total_tds":
        return float(count_plays(snapshot, PlayType.TD))
    if stat_key == "total_interceptions":
        return float(total_interceptions(snapshot))
    if stat_key == "total_field_goals":
        return float(count_plays(snapshot, PlayType.FG))
    return None


def stat_value(prop: PropRecord, snapshot: GameSnapshot) -> float | None:
    """Current value of the stat an over/under prop tracks, ``None`` when unavailable."""
    if not prop.stat_key:
        return None
    if prop.stat_key in GAME_STAT_KEYS:
        return game_stat(snapshot, prop.stat_key)
    if prop.stat_key in PLAYER_STAT_FIELDS and prop.player_name:
        line = find_player_line(snapshot, [prop.player_name])
        if line is None:
            return None
        return player_stat(line, prop.stat_key)
    return None


# ── validation ────────────────────────────────────────────────────────


def _require_options(label: str, option_values: Collection[str], *values: object) -> None:
    for value in values:
        if not isinstance(value, str) or value not in option_values:
            raise CatalogError(f"{label}: rule references unknown option {value!r}")


def _require_players(label: str, option_values: Collection[str], players: object) -> Mapping[str, list[str]]:
    if not isinstance(players, Mapping) or not players:
        raise CatalogError(f"{label}: rule requires a non-empty players mapping")
    for value, aliases in players.items():
        _require_options(label, option_values, value)
        if not isinstance(aliases, list) or not all(isinstance(a, str) and a.strip() for a in aliases) or not aliases:
            raise CatalogError(f"{label}: player option {value!r} needs at least one name alias")
    return players


def _require_stat(label: str, stat: object) -> None:
    if stat not in PLAYER_STAT_FIELDS:
        raise CatalogError(f"{label}: unknown player stat {stat!r}")


def validate_margin_buckets(label: str, buckets: object, option_values: Collection[str]) -> None:
    if not isinstance(buckets, list) or not buckets:
        raise CatalogError(f"{label}: margin rule requires buckets")
    expected_min = 1
    for index, bucket in enumerate(buckets):
        if not isinstance(bucket, Mapping):
            raise CatalogError(f"{label}: margin bucket must be a mapping")
        low = bucket.get("min")
        high = bucket.get("max")
        _require_options(label, option_values, bucket.get("value"))
        if low != expected_min:
            raise CatalogError(f"{label}: margin buckets must be contiguous from 1 (expected min {expected_min}, got {low})")
        is_last = index == len(buckets) - 1
        if is_last:
            if high is not None:
                raise CatalogError(f"{label}: last margin bucket must be open-ended")
        else:
            if not isinstance(high, int) or high < low:
                raise CatalogError(f"{label}: margin bucket {bucket.get('value')!r} has invalid max {high!r}")
            expected_min = high + 1


def validate_rule(
    rule: Rule,
    *,
    label: str,
    option_values: Collection[str],
    threshold: float | None = None,
    stat_key: str | None = None,
    player_name: str | None = None,
) -> None:
    kind = rule.kind
    param = lambda name: rule_param(rule, name)  # noqa: E731

    if kind in {RuleKind.OUTRIGHT_WINNER, RuleKind.FIRST_TO_SCORE}:
        _require_options(label, option_values, param("home"), param("away"))
    elif kind == RuleKind.STAT_OVER_UNDER:
        _require_options(label, option_values, param("over"), param("under"))
        if threshold is None or not stat_key:
            raise CatalogError(f"{label}: over/under rule requires both stat_key and threshold")
        if stat_key in PLAYER_STAT_FIELDS:
            if not player_name:
                raise CatalogError(f"{label}: player stat {stat_key!r} requires player_name")
        elif stat_key not in GAME_STAT_KEYS:
            raise CatalogError(f"{label}: unknown stat_key {stat_key!r}")
    elif kind == RuleKind.MARGIN_BUCKET:
        validate_margin_buckets(label, param("buckets"), option_values)
    elif kind == RuleKind.BLOWN_LEAD:
        _require_options(label, option_values, param("yes"), param("no"))
        lead = param("lead")
        if not isinstance(lead, int) or lead <= 0:
            raise CatalogError(f"{label}: blown lead size must be a positive integer")
    elif kind == RuleKind.STAT_COMPARISON:
        _require_stat(label, param("stat"))
        players = _require_players(label, option_values, param("players"))
        if len(players) != 2:
            raise CatalogError(f"{label}: stat comparison needs exactly two players")
    elif kind == RuleKind.LEADING_PERFORMER:
        _require_stat(label, param("stat"))
        _require_players(label, option_values, param("players"))
        if param("other") is not None:
            _require_options(label, option_values, param("other"))
    elif kind == RuleKind.FIRST_TD_SCORER:
        _require_players(label, option_values, param("players"))
        if param("field") is not None:
            _require_options(label, option_values, param("field"))
    elif kind == RuleKind.FIRST_SCORE_TYPE:
        _require_options(
            label, option_values, param("passing_td"), param("rushing_td"), param("field_goal"), param("other")
        )
    elif kind == RuleKind.OCCURRENCE:
        if param("event") not in OCCURRENCE_EVENTS:
            raise CatalogError(f"{label}: unknown occurrence event {param('event')!r}")
        _require_options(label, option_values, param("yes"), param("no"))
    elif kind == RuleKind.HIGHEST_SCORING_QUARTER:
        quarters = param("quarters")
        if not isinstance(quarters, list) or len(quarters) != 4:
            raise CatalogError(f"{label}: highest-scoring quarter needs four quarter options")
        _require_options(label, option_values, *quarters)
    elif kind == RuleKind.OVERTIME:
        _require_options(label, option_values, param("yes"), param("no"))
    else:  # pragma: no cover - RuleKind is closed
        raise CatalogError(f"{label}: unsupported rule kind {kind!r}")
