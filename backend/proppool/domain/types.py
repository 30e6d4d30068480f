from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from proppool.domain.enums import GameStatus, PlayType, PropCategory, PropStatus, PropType, RuleKind


@dataclass(frozen=True, slots=True)
class PropOption:
    label: str
    odds: int
    value: str

    def __post_init__(self) -> None:
        if not self.value.strip():
            raise ValueError("option value must not be empty")
        if self.odds == 0:
            raise ValueError("option odds must be nonzero")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> PropOption:
        return cls(label=str(raw["label"]), odds=int(raw["odds"]), value=str(raw["value"]))

    def to_dict(self) -> dict[str, object]:
        return {"label": self.label, "odds": self.odds, "value": self.value}


@dataclass(frozen=True, slots=True)
class Rule:
    kind: RuleKind
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PropRecord:
    id: int
    key: str
    sort_order: int
    question: str
    prop_type: PropType
    options: tuple[PropOption, ...]
    status: PropStatus = PropStatus.PENDING
    result: str | None = None
    auto_resolve: bool = False
    rule: Rule | None = None
    category: PropCategory = PropCategory.GAME
    threshold: float | None = None
    stat_key: str | None = None
    player_name: str | None = None
    current_value: float | None = None
    live_stats: Mapping[str, float] | None = None

    def option(self, value: str) -> PropOption | None:
        for option in self.options:
            if option.value == value:
                return option
        return None

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options)


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class PickRecord:
    id: int
    player_id: int
    prop_id: int
    selection: str


@dataclass(frozen=True, slots=True)
class ScoringPlay:
    quarter: int
    clock: str
    team: str
    play_type: PlayType
    description: str
    home_score: int
    away_score: int


@dataclass(frozen=True, slots=True)
class PlayerStatLine:
    name: str
    team: str = ""
    pass_yds: int = 0
    pass_tds: int = 0
    pass_attempts: int = 0
    pass_completions: int = 0
    interceptions: int = 0
    rush_yds: int = 0
    rush_tds: int = 0
    rush_attempts: int = 0
    rec_yds: int = 0
    rec_tds: int = 0
    receptions: int = 0
    sacks: float = 0.0
    field_goals: int = 0


@dataclass(frozen=True, slots=True)
class TeamStats:
    total_yards: int = 0
    turnovers: int = 0
    first_downs: int = 0
    penalties: int = 0
    penalty_yards: int = 0
    sacks: float = 0.0


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    home_score: int
    away_score: int
    quarter: int
    clock: str
    status: GameStatus
    home_team: str = ""
    away_team: str = ""
    last_play: str | None = None
    scoring_plays: tuple[ScoringPlay, ...] = ()
    player_stats: Mapping[str, PlayerStatLine] = field(default_factory=dict)
    home_stats: TeamStats = field(default_factory=TeamStats)
    away_stats: TeamStats = field(default_factory=TeamStats)

    @property
    def is_final(self) -> bool:
        return self.status == GameStatus.FINAL

    @property
    def is_live(self) -> bool:
        return self.status in {GameStatus.IN_PROGRESS, GameStatus.HALFTIME}


@dataclass(frozen=True, slots=True)
class Resolution:
    prop_id: int
    result: str
    reason: str


@dataclass(frozen=True, slots=True)
class PlayerScore:
    player_id: int
    name: str
    total_points: float
    max_possible: float
    picks_count: int
    correct_count: int
    resolved_count: int
    rank: int


@dataclass(frozen=True, slots=True)
class PickScore:
    pick_id: int
    is_correct: bool | None
    points_earned: float | None


@dataclass(frozen=True, slots=True)
class Scoreboard:
    players: tuple[PlayerScore, ...]
    picks: tuple[PickScore, ...]


@dataclass(frozen=True, slots=True)
class LiveUpdate:
    prop_id: int
    current_value: float | None
    live_stats: Mapping[str, float] | None
    status: PropStatus


@dataclass(frozen=True, slots=True)
class ProjectedEntry:
    player_id: int
    name: str
    confirmed_points: float
    projected_points: float
    max_possible: float
    rank: int
