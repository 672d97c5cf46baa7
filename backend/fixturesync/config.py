"""
backend/fixturesync/config.py

Purpose:
    Central settings loading for the fixture sync engine, plus validation of
    the credentials the selected provider needs before a run may start.

Dependencies:
    - pydantic-settings
    - pathlib
    - fixturesync.errors
"""

from pathlib import Path

from pydantic_settings import BaseSettings

from fixturesync.errors import ConfigurationError

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"

PROVIDER_FOOTBALL_DATA = "football-data"
PROVIDER_THESPORTSDB = "thesportsdb"


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "fixturesync"

    # Tournament + provider selection
    TOURNAMENT_ID: str = "FIFA2026"
    SYNC_PROVIDER: str = PROVIDER_FOOTBALL_DATA

    # football-data.org
    FOOTBALL_DATA_TOKEN: str = ""
    FOOTBALL_DATA_COMPETITION: str = ""
    FOOTBALL_DATA_BASE_URL: str = "https://api.football-data.org/v4"

    # TheSportsDB
    THESPORTSDB_API_KEY: str = ""
    THESPORTSDB_LEAGUE_ID: str = ""
    THESPORTSDB_SEASON: str = ""
    THESPORTSDB_ROUNDS: str = ""  # comma separated, e.g. "1,2,3,32"
    THESPORTSDB_BASE_URL: str = "https://www.thesportsdb.com/api/v1/json"

    # Upstream fetch behaviour
    PROVIDER_CACHE_TTL_SECONDS: float = 20.0
    PROVIDER_TIMEOUT_SECONDS: float = 15.0
    PROVIDER_MAX_RETRIES: int = 2
    PROVIDER_BASE_DELAY_SECONDS: float = 0.5

    # Reconciliation
    SYNC_LOCK_TTL_SECONDS: int = 600
    SYNC_LOCK_HOLDER: str = ""  # empty = hostname:pid
    SYNC_BATCH_SIZE: int = 450  # stays below the store's per-batch limit

    # Trigger windows
    LIVE_SYNC_DAYS_AHEAD: int = 3
    FIXTURE_DAYS_AHEAD: int = 200
    LIVE_WINDOW_BEFORE_HOURS: int = 6
    LIVE_WINDOW_AFTER_HOURS: int = 36

    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }

    @property
    def thesportsdb_rounds(self) -> list[str]:
        return [item.strip() for item in self.THESPORTSDB_ROUNDS.split(",") if item.strip()]

    @property
    def sync_lock_key(self) -> str:
        return f"{self.TOURNAMENT_ID}_{self.SYNC_PROVIDER}"


def validate_provider_config(config: Settings) -> None:
    """Fail fast when the selected provider lacks credentials or identifiers."""
    if not config.TOURNAMENT_ID:
        raise ConfigurationError("Missing TOURNAMENT_ID env var.")

    required: dict[str, tuple[str, ...]] = {
        PROVIDER_FOOTBALL_DATA: ("FOOTBALL_DATA_TOKEN", "FOOTBALL_DATA_COMPETITION"),
        PROVIDER_THESPORTSDB: ("THESPORTSDB_API_KEY", "THESPORTSDB_LEAGUE_ID"),
    }
    names = required.get(config.SYNC_PROVIDER)
    if names is None:
        raise ConfigurationError(f"Unsupported provider: {config.SYNC_PROVIDER}")

    missing = [name for name in names if not str(getattr(config, name, "") or "").strip()]
    if missing:
        raise ConfigurationError(f"Missing {', '.join(missing)} env var(s) for provider {config.SYNC_PROVIDER}.")

    if config.SYNC_PROVIDER == PROVIDER_THESPORTSDB and config.thesportsdb_rounds and not config.THESPORTSDB_SEASON:
        raise ConfigurationError("THESPORTSDB_SEASON is required when THESPORTSDB_ROUNDS is set.")


settings = Settings()
