"""
backend/tests/test_config.py

Purpose:
    Provider credential validation and derived settings.
"""

from __future__ import annotations

import sys

import pytest

sys.path.insert(0, "backend")

from fixturesync.config import Settings, validate_provider_config
from fixturesync.errors import ConfigurationError


def _settings(**overrides):
    values = {
        "TOURNAMENT_ID": "WC",
        "SYNC_PROVIDER": "football-data",
        "FOOTBALL_DATA_TOKEN": "tok",
        "FOOTBALL_DATA_COMPETITION": "WC",
        "THESPORTSDB_API_KEY": "",
        "THESPORTSDB_LEAGUE_ID": "",
        "THESPORTSDB_SEASON": "",
        "THESPORTSDB_ROUNDS": "",
    }
    values.update(overrides)
    return Settings(**values)


def test_complete_football_data_config_passes():
    validate_provider_config(_settings())


def test_missing_tournament_is_rejected():
    with pytest.raises(ConfigurationError, match="TOURNAMENT_ID"):
        validate_provider_config(_settings(TOURNAMENT_ID=""))


def test_missing_football_data_token_is_named():
    with pytest.raises(ConfigurationError, match="FOOTBALL_DATA_TOKEN"):
        validate_provider_config(_settings(FOOTBALL_DATA_TOKEN=" "))


def test_thesportsdb_requires_key_and_league():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_provider_config(_settings(SYNC_PROVIDER="thesportsdb"))

    assert "THESPORTSDB_API_KEY" in str(excinfo.value)
    assert "THESPORTSDB_LEAGUE_ID" in str(excinfo.value)


def test_thesportsdb_rounds_require_season():
    config = _settings(
        SYNC_PROVIDER="thesportsdb",
        THESPORTSDB_API_KEY="k",
        THESPORTSDB_LEAGUE_ID="4429",
        THESPORTSDB_ROUNDS="1, 2,,32",
    )

    assert config.thesportsdb_rounds == ["1", "2", "32"]
    with pytest.raises(ConfigurationError, match="THESPORTSDB_SEASON"):
        validate_provider_config(config)

    validate_provider_config(config.model_copy(update={"THESPORTSDB_SEASON": "2026"}))


def test_unknown_provider_is_rejected():
    with pytest.raises(ConfigurationError, match="Unsupported provider"):
        validate_provider_config(_settings(SYNC_PROVIDER="sportmonks"))


def test_lock_key_combines_tournament_and_provider():
    assert _settings().sync_lock_key == "WC_football-data"
