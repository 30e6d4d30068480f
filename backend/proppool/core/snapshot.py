"""Normalize live game payloads into a :class:`GameSnapshot`.

Two input shapes are supported:

* the ESPN ``summary`` document (``parse_espn_summary``), and
* the canonical snapshot dictionary used by admin tooling and tests
  (``snapshot_from_dict``), whose keys mirror the dataclass fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from proppool.domain.enums import GameStatus, PlayType
from proppool.domain.types import GameSnapshot, PlayerStatLine, ScoringPlay, TeamStats


def safe_num(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if number != number:
        return 0.0
    return number


def _safe_int(value: object) -> int:
    return int(safe_num(value))


def parse_status(status_name: str | None, period: int) -> GameStatus:
    normalized = (status_name or "").strip().lower()
    if "final" in normalized:
        return GameStatus.FINAL
    if "halftime" in normalized:
        return GameStatus.HALFTIME
    if "progress" in normalized or "end_period" in normalized or period > 0:
        return GameStatus.IN_PROGRESS
    return GameStatus.PRE


def parse_play_type(raw: str | None) -> PlayType | None:
    normalized = (raw or "").strip().upper()
    if not normalized or "MISSED" in normalized or "BLOCKED" in normalized:
        return None
    if "SAFETY" in normalized or normalized == "SF":
        return PlayType.SAFETY
    if "FIELD GOAL" in normalized or normalized == "FG":
        return PlayType.FG
    if "TOUCHDOWN" in normalized or normalized == "TD":
        return PlayType.TD
    return None


def _split_made(raw: object) -> tuple[float, float]:
    parts = str(raw or "0/0").split("/")
    made = safe_num(parts[0])
    attempted = safe_num(parts[1]) if len(parts) > 1 else 0.0
    return made, attempted


def parse_player_stats(boxscore: Mapping[str, Any] | None) -> dict[str, PlayerStatLine]:
    lines: dict[str, dict[str, Any]] = {}
    if not boxscore:
        return {}

    for team_data in boxscore.get("players") or []:
        team_abbr = (team_data.get("team") or {}).get("abbreviation") or ""
        for category in team_data.get("statistics") or []:
            category_name = str(category.get("name") or "").lower()
            for athlete in category.get("athletes") or []:
                info = athlete.get("athlete") or {}
                name = info.get("displayName") or "Unknown"
                athlete_id = str(info.get("id") or name)
                line = lines.setdefault(athlete_id, {"name": name, "team": team_abbr})
                stats = [str(value) for value in athlete.get("stats") or []]

                # Column layouts follow the ESPN box score tables.
                if category_name == "passing" and len(stats) >= 5:
                    completions, attempts = _split_made(stats[0])
                    line["pass_completions"] = int(completions)
                    line["pass_attempts"] = int(attempts)
                    line["pass_yds"] = _safe_int(stats[1])
                    line["pass_tds"] = _safe_int(stats[3])
                    line["interceptions"] = _safe_int(stats[4])
                elif category_name == "rushing" and len(stats) >= 4:
                    line["rush_attempts"] = _safe_int(stats[0])
                    line["rush_yds"] = _safe_int(stats[1])
                    line["rush_tds"] = _safe_int(stats[3])
                elif category_name == "receiving" and len(stats) >= 4:
                    line["receptions"] = _safe_int(stats[0])
                    line["rec_yds"] = _safe_int(stats[1])
                    line["rec_tds"] = _safe_int(stats[3])
                elif category_name == "defensive" and len(stats) >= 3:
                    line["sacks"] = safe_num(stats[2])
                elif category_name == "kicking" and len(stats) >= 1:
                    made, _attempted = _split_made(stats[0])
                    line["field_goals"] = int(made)

    return {athlete_id: PlayerStatLine(**values) for athlete_id, values in lines.items()}


def _parse_espn_scoring_plays(raw_plays: list[Mapping[str, Any]]) -> list[ScoringPlay]:
    plays: list[ScoringPlay] = []
    for raw in raw_plays:
        type_info = raw.get("type") or {}
        play_type = parse_play_type(type_info.get("abbreviation") or type_info.get("text"))
        if play_type is None:
            continue
        plays.append(
            ScoringPlay(
                quarter=_safe_int((raw.get("period") or {}).get("number")),
                clock=str((raw.get("clock") or {}).get("displayValue") or ""),
                team=str((raw.get("team") or {}).get("abbreviation") or ""),
                play_type=play_type,
                description=str(raw.get("text") or ""),
                home_score=_safe_int(raw.get("homeScore")),
                away_score=_safe_int(raw.get("awayScore")),
            )
        )
    return plays


def _parse_drive_scoring_plays(drives: Mapping[str, Any] | None) -> list[ScoringPlay]:
    plays: list[ScoringPlay] = []
    if not drives:
        return plays

    for drive in drives.get("previous") or []:
        result = drive.get("result")
        result_name = result.get("name") if isinstance(result, Mapping) else result
        play_type = parse_play_type(result_name)
        if play_type is None:
            continue
        drive_plays = drive.get("plays") or []
        last_play = drive_plays[-1] if drive_plays else {}
        plays.append(
            ScoringPlay(
                quarter=_safe_int((last_play.get("period") or {}).get("number")),
                clock=str((last_play.get("clock") or {}).get("displayValue") or ""),
                team=str((drive.get("team") or {}).get("abbreviation") or ""),
                play_type=play_type,
                description=str(drive.get("description") or last_play.get("text") or ""),
                home_score=_safe_int(last_play.get("homeScore")),
                away_score=_safe_int(last_play.get("awayScore")),
            )
        )
    return plays


def _parse_team_stats(team_data: Mapping[str, Any] | None) -> TeamStats:
    if not team_data:
        return TeamStats()
    by_name = {
        str(item.get("name")): item.get("displayValue")
        for item in team_data.get("statistics") or []
    }
    return TeamStats(
        total_yards=_safe_int(by_name.get("totalYards")),
        turnovers=_safe_int(by_name.get("turnovers")),
        first_downs=_safe_int(by_name.get("firstDowns")),
        penalties=_safe_int(str(by_name.get("totalPenaltiesYards") or "0").split("-")[0]),
        penalty_yards=_safe_int(str(by_name.get("totalPenaltiesYards") or "0-0").split("-")[-1]),
        sacks=safe_num(str(by_name.get("sacksYardsLost") or by_name.get("sacksTotal") or "0").split("-")[0]),
    )


def parse_team_stats(boxscore: Mapping[str, Any] | None) -> tuple[TeamStats, TeamStats]:
    """Return ``(home, away)`` team stats. ESPN lists away first when ``homeAway`` is absent."""
    teams = list((boxscore or {}).get("teams") or [])
    home = next((team for team in teams if team.get("homeAway") == "home"), None)
    away = next((team for team in teams if team.get("homeAway") == "away"), None)
    if home is None and len(teams) > 1:
        home = teams[1]
    if away is None and teams:
        away = teams[0]
    return _parse_team_stats(home), _parse_team_stats(away)


def parse_espn_summary(payload: Mapping[str, Any]) -> GameSnapshot:
    competition = ((payload.get("header") or {}).get("competitions") or [{}])[0]
    competitors = competition.get("competitors") or []
    home = next((c for c in competitors if c.get("homeAway") == "home"), {})
    away = next((c for c in competitors if c.get("homeAway") == "away"), {})
    status = competition.get("status") or {}
    period = _safe_int(status.get("period"))

    if payload.get("scoringPlays"):
        scoring_plays = _parse_espn_scoring_plays(payload["scoringPlays"])
    else:
        scoring_plays = _parse_drive_scoring_plays(payload.get("drives"))

    current_plays = ((payload.get("drives") or {}).get("current") or {}).get("plays") or []
    home_stats, away_stats = parse_team_stats(payload.get("boxscore"))

    return GameSnapshot(
        home_score=_safe_int(home.get("score")),
        away_score=_safe_int(away.get("score")),
        quarter=period,
        clock=str(status.get("displayClock") or "0:00"),
        status=parse_status((status.get("type") or {}).get("name"), period),
        home_team=str((home.get("team") or {}).get("abbreviation") or ""),
        away_team=str((away.get("team") or {}).get("abbreviation") or ""),
        last_play=current_plays[-1].get("text") if current_plays else None,
        scoring_plays=tuple(scoring_plays),
        player_stats=parse_player_stats(payload.get("boxscore")),
        home_stats=home_stats,
        away_stats=away_stats,
    )


def snapshot_from_dict(raw: Mapping[str, Any]) -> GameSnapshot:
    plays = []
    for play in raw.get("scoring_plays") or []:
        play_type = parse_play_type(play.get("play_type") or play.get("type"))
        if play_type is None:
            raise ValueError(f"Unsupported scoring play type {play.get('play_type') or play.get('type')!r}")
        plays.append(
            ScoringPlay(
                quarter=int(play.get("quarter", 0)),
                clock=str(play.get("clock", "")),
                team=str(play.get("team", "")),
                play_type=play_type,
                description=str(play.get("description", "")),
                home_score=int(play.get("home_score", 0)),
                away_score=int(play.get("away_score", 0)),
            )
        )

    player_stats = {
        str(player_id): PlayerStatLine(**dict(line))
        for player_id, line in (raw.get("player_stats") or {}).items()
    }

    return GameSnapshot(
        home_score=int(raw.get("home_score", 0)),
        away_score=int(raw.get("away_score", 0)),
        quarter=int(raw.get("quarter", 0)),
        clock=str(raw.get("clock", "0:00")),
        status=GameStatus(raw.get("status", GameStatus.PRE.value)),
        home_team=str(raw.get("home_team", "")),
        away_team=str(raw.get("away_team", "")),
        last_play=raw.get("last_play"),
        scoring_plays=tuple(plays),
        player_stats=player_stats,
        home_stats=TeamStats(**dict(raw.get("home_stats") or {})),
        away_stats=TeamStats(**dict(raw.get("away_stats") or {})),
    )
