from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_env: str
    log_level: str
    database_url: str
    admin_secret: str
    allowed_player_names: tuple[str, ...]
    lock_time: datetime | None
    espn_base_url: str
    espn_event_id: str
    espn_timeout_sec: float
    odds_api_key: str
    odds_api_base_url: str
    odds_sport_key: str
    odds_event_id: str
    enable_poller: bool
    poll_interval_sec: int
    poll_jitter_sec: int
    sched_require_db: bool
    join_rate_limit_max: int
    join_rate_limit_window_sec: int
    trust_proxy_headers: bool

    def picks_locked(self, now: datetime | None = None) -> bool:
        if self.lock_time is None:
            return False
        current = now or datetime.now(timezone.utc)
        return current >= self.lock_time


def _csv_env(name: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(name, default)
    if not raw.strip():
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    return float(raw.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw.strip())


def _datetime_env(name: str, default: str = "") -> datetime | None:
    raw = os.getenv(name, default).strip()
    if not raw:
        return None
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@lru_cache
def get_settings() -> Settings:
    # LOCK_TIME unset means picks never lock; set it to kickoff in production.
    return Settings(
        app_name=os.getenv("APP_NAME", "prop-pool-backend"),
        app_env=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        database_url=os.getenv("DATABASE_URL", "sqlite+pysqlite:///./prop_pool.db"),
        admin_secret=os.getenv("ADMIN_SECRET", ""),
        allowed_player_names=_csv_env(
            "ALLOWED_PLAYER_NAMES", "Sam,Adam,Brian,John,Arjun,Spencer,Jin,Justin,Russ,Miguel"
        ),
        lock_time=_datetime_env("LOCK_TIME"),
        espn_base_url=os.getenv(
            "ESPN_BASE_URL", "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
        ),
        espn_event_id=os.getenv("ESPN_EVENT_ID", ""),
        espn_timeout_sec=_float_env("ESPN_TIMEOUT_SEC", 10.0),
        odds_api_key=os.getenv("ODDS_API_KEY", ""),
        odds_api_base_url=os.getenv("ODDS_API_BASE_URL", "https://api.the-odds-api.com/v4"),
        odds_sport_key=os.getenv("ODDS_SPORT_KEY", "americanfootball_nfl"),
        odds_event_id=os.getenv("ODDS_EVENT_ID", ""),
        enable_poller=_bool_env("ENABLE_POLLER", False),
        poll_interval_sec=_int_env("POLL_INTERVAL_SEC", 30),
        poll_jitter_sec=_int_env("POLL_JITTER_SEC", 0),
        sched_require_db=_bool_env("SCHED_REQUIRE_DB", True),
        join_rate_limit_max=_int_env("JOIN_RATE_LIMIT_MAX", 5),
        join_rate_limit_window_sec=_int_env("JOIN_RATE_LIMIT_WINDOW_SEC", 60),
        trust_proxy_headers=_bool_env("TRUST_PROXY_HEADERS", False),
    )
