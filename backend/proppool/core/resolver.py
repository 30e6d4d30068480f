from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from proppool.core.rules import (
    count_plays,
    find_player_line,
    matches_alias,
    player_stat,
    rule_param,
    stat_value,
    total_interceptions,
)
from proppool.domain.enums import PlayType, PropStatus, RuleKind
from proppool.domain.types import GameSnapshot, PropRecord, Resolution, Rule, ScoringPlay

logger = logging.getLogger(__name__)

Outcome = tuple[str, str]
Evaluator = Callable[[PropRecord, Rule, GameSnapshot], Outcome | None]

EVALUATORS: dict[RuleKind, Evaluator] = {}


def _evaluator(kind: RuleKind) -> Callable[[Evaluator], Evaluator]:
    def register(func: Evaluator) -> Evaluator:
        EVALUATORS[kind] = func
        return func

    return register


def _first_play(snapshot: GameSnapshot, play_type: PlayType | None = None) -> ScoringPlay | None:
    for play in snapshot.scoring_plays:
        if play_type is None or play.play_type == play_type:
            return play
    return None


def _score_line(snapshot: GameSnapshot) -> str:
    return f"{snapshot.away_team or 'away'} {snapshot.away_score} - {snapshot.home_team or 'home'} {snapshot.home_score}"


def points_by_quarter(snapshot: GameSnapshot) -> dict[int, int]:
    """Regulation points per quarter, from deltas between consecutive scoring plays."""
    totals = {1: 0, 2: 0, 3: 0, 4: 0}
    previous_total = 0
    for play in snapshot.scoring_plays:
        running_total = play.home_score + play.away_score
        delta = running_total - previous_total
        previous_total = running_total
        if play.quarter in totals:
            totals[play.quarter] += delta
    return totals


def max_leads(snapshot: GameSnapshot) -> tuple[int, int]:
    """Largest lead held by (home, away) after any scoring play."""
    max_home_lead = 0
    max_away_lead = 0
    for play in snapshot.scoring_plays:
        diff = play.home_score - play.away_score
        max_home_lead = max(max_home_lead, diff)
        max_away_lead = max(max_away_lead, -diff)
    return max_home_lead, max_away_lead


@_evaluator(RuleKind.OUTRIGHT_WINNER)
def _outright_winner(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final or snapshot.home_score == snapshot.away_score:
        return None
    side = "home" if snapshot.home_score > snapshot.away_score else "away"
    return rule_param(rule, side), f"Final score: {_score_line(snapshot)}"


@_evaluator(RuleKind.STAT_OVER_UNDER)
def _stat_over_under(prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final or prop.threshold is None:
        return None
    value = stat_value(prop, snapshot)
    if value is None:
        return None
    side = "over" if value > prop.threshold else "under"
    subject = f"{prop.player_name} {prop.stat_key}" if prop.player_name else prop.stat_key
    return rule_param(rule, side), f"{subject}: {value:g} vs line {prop.threshold:g}"


@_evaluator(RuleKind.MARGIN_BUCKET)
def _margin_bucket(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final:
        return None
    margin = abs(snapshot.home_score - snapshot.away_score)
    for bucket in rule_param(rule, "buckets"):
        high = bucket.get("max")
        if bucket["min"] <= margin and (high is None or margin <= high):
            return bucket["value"], f"Margin: {margin} points"
    return None


@_evaluator(RuleKind.FIRST_TO_SCORE)
def _first_to_score(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    first = _first_play(snapshot)
    if first is None:
        return None
    team = first.team.strip().upper()
    if snapshot.home_team and team == snapshot.home_team.strip().upper():
        side = "home"
    elif snapshot.away_team and team == snapshot.away_team.strip().upper():
        side = "away"
    else:
        logger.warning("First scoring team %r matches neither %r nor %r", first.team, snapshot.home_team, snapshot.away_team)
        return None
    return rule_param(rule, side), f"First score by {first.team}: {first.description[:60]}"


@_evaluator(RuleKind.BLOWN_LEAD)
def _blown_lead(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final:
        return None
    lead = rule_param(rule, "lead")
    max_home_lead, max_away_lead = max_leads(snapshot)
    home_blew_it = max_home_lead >= lead and snapshot.away_score > snapshot.home_score
    away_blew_it = max_away_lead >= lead and snapshot.home_score > snapshot.away_score
    if home_blew_it or away_blew_it:
        return rule_param(rule, "yes"), f"A team led by {lead}+ and lost (max leads home {max_home_lead}, away {max_away_lead})"
    return rule_param(rule, "no"), f"No team led by {lead}+ and lost (max leads home {max_home_lead}, away {max_away_lead})"


@_evaluator(RuleKind.STAT_COMPARISON)
def _stat_comparison(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final:
        return None
    stat = rule_param(rule, "stat")
    (first_value, first_aliases), (second_value, second_aliases) = list(rule_param(rule, "players").items())
    first_line = find_player_line(snapshot, first_aliases)
    second_line = find_player_line(snapshot, second_aliases)
    if first_line is None or second_line is None:
        return None
    first_stat = player_stat(first_line, stat)
    second_stat = player_stat(second_line, stat)
    if first_stat == second_stat:
        # Exact ties are a push and stay with the commissioner.
        return None
    winner = first_value if first_stat > second_stat else second_value
    return winner, f"{first_line.name}: {first_stat:g} {stat}, {second_line.name}: {second_stat:g} {stat}"


@_evaluator(RuleKind.LEADING_PERFORMER)
def _leading_performer(prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final or not snapshot.player_stats:
        return None
    stat = rule_param(rule, "stat")
    lines = list(snapshot.player_stats.values())
    best = max(player_stat(line, stat) for line in lines)
    leader = next(line for line in lines if player_stat(line, stat) == best)

    named = [(value, find_player_line(snapshot, aliases)) for value, aliases in rule_param(rule, "players").items()]
    for value, line in named:
        if line is not None and line.name == leader.name:
            return value, f"Leader: {leader.name} with {best:g} {stat}"
    for value, line in named:
        if line is not None and player_stat(line, stat) == best:
            return value, f"Tied for lead: {line.name} with {best:g} {stat} (named option wins tie)"

    other = rule_param(rule, "other")
    if other is None or prop.option(other) is None:
        return None
    return other, f"Leader: {leader.name} ({best:g} {stat}) is not a named option"


@_evaluator(RuleKind.FIRST_TD_SCORER)
def _first_td_scorer(prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    first_td = _first_play(snapshot, PlayType.TD)
    if first_td is None:
        return None
    for value, aliases in rule_param(rule, "players").items():
        if matches_alias(first_td.description, aliases):
            return value, f"First TD: {first_td.description[:80]}"
    field_value = rule_param(rule, "field")
    if field_value is None or prop.option(field_value) is None:
        return None
    return field_value, f"First TD (unlisted player): {first_td.description[:80]}"


@_evaluator(RuleKind.FIRST_SCORE_TYPE)
def _first_score_type(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    first = _first_play(snapshot)
    if first is None:
        return None
    description = first.description.lower()
    if first.play_type == PlayType.FG:
        kind, label = "field_goal", "FG"
    elif first.play_type == PlayType.SAFETY:
        kind, label = "other", "Safety"
    elif "pass" in description:
        kind, label = "passing_td", "Passing TD"
    elif "run" in description or "rush" in description:
        kind, label = "rushing_td", "Rushing TD"
    else:
        kind, label = "other", "TD (non-pass/rush)"
    return rule_param(rule, kind), f"First score: {label} ({first.description[:60]})"


_EVENT_PLAY_TYPES = {"safety": PlayType.SAFETY, "touchdown": PlayType.TD, "field_goal": PlayType.FG}


def _occurrence_count(event: str, snapshot: GameSnapshot) -> int:
    if event == "interception":
        return total_interceptions(snapshot)
    play_type = _EVENT_PLAY_TYPES.get(event)
    return count_plays(snapshot, play_type) if play_type is not None else 0


@_evaluator(RuleKind.OCCURRENCE)
def _occurrence(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    event = rule_param(rule, "event")
    count = _occurrence_count(event, snapshot)
    if count > 0:
        return rule_param(rule, "yes"), f"{count} {event}(s) so far"
    if snapshot.is_final:
        return rule_param(rule, "no"), f"No {event} in the game"
    return None


@_evaluator(RuleKind.HIGHEST_SCORING_QUARTER)
def _highest_scoring_quarter(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if not snapshot.is_final:
        return None
    totals = points_by_quarter(snapshot)
    best_quarter = 1
    for quarter in (2, 3, 4):
        if totals[quarter] > totals[best_quarter]:
            best_quarter = quarter
    breakdown = " ".join(f"Q{q}:{totals[q]}" for q in (1, 2, 3, 4))
    return rule_param(rule, "quarters")[best_quarter - 1], f"{breakdown}; Q{best_quarter} wins with {totals[best_quarter]}"


@_evaluator(RuleKind.OVERTIME)
def _overtime(_prop: PropRecord, rule: Rule, snapshot: GameSnapshot) -> Outcome | None:
    if snapshot.quarter > 4:
        return rule_param(rule, "yes"), f"Game reached overtime (period {snapshot.quarter})"
    if snapshot.is_final:
        return rule_param(rule, "no"), "Game ended in regulation"
    return None


def evaluate(prop: PropRecord, snapshot: GameSnapshot) -> Outcome | None:
    if prop.rule is None:
        return None
    evaluator = EVALUATORS.get(prop.rule.kind)
    if evaluator is None:
        logger.warning("No evaluator registered for rule kind %s (prop %s)", prop.rule.kind, prop.key)
        return None
    return evaluator(prop, prop.rule, snapshot)


def resolve(props: Sequence[PropRecord], snapshot: GameSnapshot) -> list[Resolution]:
    """Propose results for every unresolved auto prop the snapshot can decide. No side effects."""
    resolutions: list[Resolution] = []
    for prop in sorted(props, key=lambda item: (item.sort_order, item.id)):
        if prop.status == PropStatus.RESOLVED or not prop.auto_resolve:
            continue
        outcome = evaluate(prop, snapshot)
        if outcome is None:
            continue
        result, reason = outcome
        if prop.option(result) is None:
            logger.warning("Rule for prop %s produced %r which is not an option; skipping", prop.key, result)
            continue
        resolutions.append(Resolution(prop_id=prop.id, result=result, reason=reason))
    return resolutions


def manual_queue(props: Sequence[PropRecord]) -> list[PropRecord]:
    return sorted(
        (prop for prop in props if prop.status != PropStatus.RESOLVED and not prop.auto_resolve),
        key=lambda item: (item.sort_order, item.id),
    )


def stalled_after_final(props: Sequence[PropRecord], snapshot: GameSnapshot) -> list[PropRecord]:
    """Auto props a final snapshot still cannot decide (pushes, missing players)."""
    if not snapshot.is_final:
        return []
    return [
        prop
        for prop in sorted(props, key=lambda item: (item.sort_order, item.id))
        if prop.status != PropStatus.RESOLVED and prop.auto_resolve and evaluate(prop, snapshot) is None
    ]
