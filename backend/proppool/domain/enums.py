from enum import StrEnum


class PropCategory(StrEnum):
    GAME = "game"
    PLAYER = "player"
    FUN = "fun"
    DEGEN = "degen"


class PropType(StrEnum):
    BINARY = "binary"
    OVER_UNDER = "over_under"
    MULTI_CHOICE = "multi_choice"


class PropStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class GameStatus(StrEnum):
    PRE = "pre"
    IN_PROGRESS = "in_progress"
    HALFTIME = "halftime"
    FINAL = "final"


class PlayType(StrEnum):
    TD = "TD"
    FG = "FG"
    SAFETY = "Safety"


class RuleKind(StrEnum):
    OUTRIGHT_WINNER = "outright_winner"
    STAT_OVER_UNDER = "stat_over_under"
    MARGIN_BUCKET = "margin_bucket"
    FIRST_TO_SCORE = "first_to_score"
    BLOWN_LEAD = "blown_lead"
    STAT_COMPARISON = "stat_comparison"
    LEADING_PERFORMER = "leading_performer"
    FIRST_TD_SCORER = "first_td_scorer"
    FIRST_SCORE_TYPE = "first_score_type"
    OCCURRENCE = "occurrence"
    HIGHEST_SCORING_QUARTER = "highest_scoring_quarter"
    OVERTIME = "overtime"


class RunStatus(StrEnum):
    OK = "ok"
    ERROR = "error"
