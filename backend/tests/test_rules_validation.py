from __future__ import annotations

import pytest

from proppool.core.rules import rule_param, validate_margin_buckets, validate_rule
from proppool.domain.enums import RuleKind
from proppool.domain.errors import CatalogError
from proppool.domain.types import Rule

BUCKET_VALUES = ("1_6", "7_12", "13_plus")


def test_rule_param_falls_back_to_kind_defaults() -> None:
    rule = Rule(RuleKind.BLOWN_LEAD)
    assert rule_param(rule, "lead") == 14
    assert rule_param(rule, "yes") == "yes"
    assert rule_param(Rule(RuleKind.BLOWN_LEAD, {"lead": 10}), "lead") == 10
    assert rule_param(rule, "missing") is None


def test_margin_buckets_must_start_at_one_and_be_contiguous() -> None:
    good = [
        {"min": 1, "max": 6, "value": "1_6"},
        {"min": 7, "max": 12, "value": "7_12"},
        {"min": 13, "max": None, "value": "13_plus"},
    ]
    validate_margin_buckets("prop", good, BUCKET_VALUES)

    gap = [dict(good[0]), {"min": 8, "max": 12, "value": "7_12"}, dict(good[2])]
    with pytest.raises(CatalogError, match="contiguous"):
        validate_margin_buckets("prop", gap, BUCKET_VALUES)

    closed = [dict(good[0]), dict(good[1]), {"min": 13, "max": 30, "value": "13_plus"}]
    with pytest.raises(CatalogError, match="open-ended"):
        validate_margin_buckets("prop", closed, BUCKET_VALUES)

    zero_start = [{"min": 0, "max": 6, "value": "1_6"}, dict(good[1]), dict(good[2])]
    with pytest.raises(CatalogError):
        validate_margin_buckets("prop", zero_start, BUCKET_VALUES)


def test_over_under_needs_threshold_stat_and_player() -> None:
    rule = Rule(RuleKind.STAT_OVER_UNDER)
    validate_rule(rule, label="p", option_values=("over", "under"), threshold=45.5, stat_key="total_points")

    with pytest.raises(CatalogError, match="threshold"):
        validate_rule(rule, label="p", option_values=("over", "under"), stat_key="total_points")
    with pytest.raises(CatalogError, match="player_name"):
        validate_rule(rule, label="p", option_values=("over", "under"), threshold=250.5, stat_key="pass_yds")
    with pytest.raises(CatalogError, match="unknown stat_key"):
        validate_rule(rule, label="p", option_values=("over", "under"), threshold=1.5, stat_key="punts")


def test_rule_must_reference_existing_options() -> None:
    rule = Rule(RuleKind.OUTRIGHT_WINNER, {"home": "seahawks", "away": "pats"})
    with pytest.raises(CatalogError, match="unknown option"):
        validate_rule(rule, label="p", option_values=("seahawks", "patriots"))


def test_stat_comparison_needs_two_aliased_players() -> None:
    three = Rule(
        RuleKind.STAT_COMPARISON,
        {"stat": "pass_yds", "players": {"a": ["a"], "b": ["b"], "c": ["c"]}},
    )
    with pytest.raises(CatalogError, match="exactly two"):
        validate_rule(three, label="p", option_values=("a", "b", "c"))

    no_alias = Rule(RuleKind.STAT_COMPARISON, {"stat": "pass_yds", "players": {"a": [], "b": ["b"]}})
    with pytest.raises(CatalogError, match="alias"):
        validate_rule(no_alias, label="p", option_values=("a", "b"))

    bad_stat = Rule(RuleKind.STAT_COMPARISON, {"stat": "style_points", "players": {"a": ["a"], "b": ["b"]}})
    with pytest.raises(CatalogError, match="unknown player stat"):
        validate_rule(bad_stat, label="p", option_values=("a", "b"))


def test_occurrence_and_quarter_rules() -> None:
    with pytest.raises(CatalogError, match="occurrence event"):
        validate_rule(Rule(RuleKind.OCCURRENCE, {"event": "fumble"}), label="p", option_values=("yes", "no"))
    validate_rule(Rule(RuleKind.OCCURRENCE, {"event": "touchdown"}), label="p", option_values=("yes", "no"))

    with pytest.raises(CatalogError, match="four quarter"):
        validate_rule(
            Rule(RuleKind.HIGHEST_SCORING_QUARTER, {"quarters": ["q1", "q2"]}),
            label="p",
            option_values=("q1", "q2"),
        )


def test_blown_lead_size_must_be_positive() -> None:
    with pytest.raises(CatalogError, match="positive"):
        validate_rule(Rule(RuleKind.BLOWN_LEAD, {"lead": 0}), label="p", option_values=("yes", "no"))
