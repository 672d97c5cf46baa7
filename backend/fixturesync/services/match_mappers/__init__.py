"""
backend/fixturesync/services/match_mappers/__init__.py

Purpose:
    Mapper registry keyed by provider tag.
"""

from __future__ import annotations

from typing import Any

from fixturesync.config import PROVIDER_FOOTBALL_DATA, PROVIDER_THESPORTSDB
from fixturesync.models.matches import MatchRecord
from fixturesync.services.match_mappers.base import MatchMapper
from fixturesync.services.match_mappers.football_data_mapper import map_football_data_match
from fixturesync.services.match_mappers.thesportsdb_mapper import map_thesportsdb_event

MAPPERS: dict[str, MatchMapper] = {
    PROVIDER_FOOTBALL_DATA: map_football_data_match,
    PROVIDER_THESPORTSDB: map_thesportsdb_event,
}


def map_record(provider: str, raw: dict[str, Any]) -> MatchRecord:
    try:
        mapper = MAPPERS[provider]
    except KeyError:
        raise ValueError(f"No mapper registered for provider {provider!r}") from None
    return mapper(raw)


__all__ = [
    "MAPPERS",
    "map_record",
    "map_football_data_match",
    "map_thesportsdb_event",
]
