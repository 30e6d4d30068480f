from __future__ import annotations

import math


def _ensure_finite(value: float, name: str) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    return value


def validate_odds(american_odds: object) -> int:
    """Strict check applied to catalog odds before they are seeded."""
    if isinstance(american_odds, bool) or not isinstance(american_odds, int):
        raise ValueError("american_odds must be an integer")
    if abs(american_odds) < 100:
        raise ValueError("american_odds must be <= -100 or >= 100")
    return american_odds


def points_for(american_odds: int) -> float:
    """Points awarded for a correct pick: the decimal-odds payout per unit stake."""
    american_odds = _ensure_finite(float(american_odds), "american_odds")
    if american_odds == 0:
        raise ValueError("american_odds must be nonzero")
    if american_odds > 0:
        return 1.0 + (american_odds / 100.0)
    return 1.0 + (100.0 / abs(american_odds))


def odds_for_points(points: float) -> int:
    points = _ensure_finite(float(points), "points")
    if points <= 1.0:
        raise ValueError("points must be greater than 1")
    if points >= 2.0:
        return int(round((points - 1.0) * 100.0))
    return int(round(-100.0 / (points - 1.0)))


def format_odds(american_odds: int) -> str:
    return f"+{american_odds}" if american_odds > 0 else str(american_odds)


def format_points(points: float) -> str:
    return f"{points:.2f}"


def quarter_label(quarter: int) -> str:
    if quarter == 0:
        return "PRE"
    if quarter <= 4:
        return f"Q{quarter}"
    return "OT"
