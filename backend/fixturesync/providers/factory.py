"""
backend/fixturesync/providers/factory.py

Purpose:
    Build the configured fixture provider with its HTTP client and its own
    response cache.
"""

from __future__ import annotations

from fixturesync.config import PROVIDER_FOOTBALL_DATA, PROVIDER_THESPORTSDB, Settings
from fixturesync.errors import ConfigurationError
from fixturesync.providers.base import FixtureProvider
from fixturesync.providers.fetch_cache import TTLCache
from fixturesync.providers.football_data import FootballDataProvider
from fixturesync.providers.http_client import ResilientClient
from fixturesync.providers.thesportsdb import TheSportsDBProvider


def create_provider(config: Settings, cache: TTLCache | None = None) -> FixtureProvider:
    cache = cache if cache is not None else TTLCache(config.PROVIDER_CACHE_TTL_SECONDS)

    if config.SYNC_PROVIDER == PROVIDER_FOOTBALL_DATA:
        return FootballDataProvider(
            token=config.FOOTBALL_DATA_TOKEN,
            competition_id=config.FOOTBALL_DATA_COMPETITION,
            base_url=config.FOOTBALL_DATA_BASE_URL,
            client=ResilientClient(
                "football_data",
                timeout=config.PROVIDER_TIMEOUT_SECONDS,
                max_retries=config.PROVIDER_MAX_RETRIES,
                base_delay=config.PROVIDER_BASE_DELAY_SECONDS,
            ),
            cache=cache,
        )

    if config.SYNC_PROVIDER == PROVIDER_THESPORTSDB:
        return TheSportsDBProvider(
            api_key=config.THESPORTSDB_API_KEY,
            league_id=config.THESPORTSDB_LEAGUE_ID,
            season=config.THESPORTSDB_SEASON,
            rounds=config.thesportsdb_rounds,
            base_url=config.THESPORTSDB_BASE_URL,
            client=ResilientClient(
                "thesportsdb",
                timeout=config.PROVIDER_TIMEOUT_SECONDS,
                max_retries=config.PROVIDER_MAX_RETRIES,
                base_delay=config.PROVIDER_BASE_DELAY_SECONDS,
                secrets=(config.THESPORTSDB_API_KEY,),
            ),
            cache=cache,
        )

    raise ConfigurationError(f"Unsupported provider: {config.SYNC_PROVIDER}")
