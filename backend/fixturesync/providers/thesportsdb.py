"""
backend/fixturesync/providers/thesportsdb.py

Purpose:
    TheSportsDB fixture source. The API has no date-range endpoint, so events
    come from (in order of preference) configured rounds, the full season, or
    the past/next league feeds, and are then filtered to the requested window.

Dependencies:
    - fixturesync.providers.base
    - fixturesync.providers.http_client
"""

from __future__ import annotations

import logging
from typing import Any

from fixturesync.config import PROVIDER_THESPORTSDB
from fixturesync.providers.base import FetchOk, FetchResult, FixtureProvider
from fixturesync.providers.fetch_cache import TTLCache
from fixturesync.providers.http_client import ResilientClient

logger = logging.getLogger("fixturesync.thesportsdb")


def merge_events(*groups: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """De-duplicate by idEvent; later groups win. Events without an id are dropped."""
    by_id: dict[str, dict[str, Any]] = {}
    for events in groups:
        for event in events or []:
            if isinstance(event, dict) and event.get("idEvent"):
                by_id[str(event["idEvent"])] = event
    return list(by_id.values())


def is_within_range(event: dict[str, Any], date_from: str | None, date_to: str | None) -> bool:
    event_date = str(event.get("dateEvent") or "").strip()
    if not event_date:
        return True
    if date_from and event_date < date_from:
        return False
    if date_to and event_date > date_to:
        return False
    return True


class TheSportsDBProvider(FixtureProvider):
    name = PROVIDER_THESPORTSDB

    def __init__(
        self,
        *,
        api_key: str,
        league_id: str,
        season: str = "",
        rounds: list[str] | None = None,
        base_url: str = "https://www.thesportsdb.com/api/v1/json",
        client: ResilientClient | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        super().__init__(client or ResilientClient("thesportsdb", secrets=(api_key,)), cache)
        self._api_key = api_key
        self._league_id = league_id
        self._season = str(season or "").strip()
        self._rounds = [str(r).strip() for r in (rounds or []) if str(r).strip()]
        self._base_url = base_url.rstrip("/")

    @staticmethod
    def extract_records(payload: Any) -> list[dict[str, Any]]:
        events = payload.get("events") if isinstance(payload, dict) else None
        return [e for e in events if isinstance(e, dict)] if isinstance(events, list) else []

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/{self._api_key}/{endpoint}"

    async def get_matches_by_date_range(self, date_from: str | None, date_to: str | None) -> FetchResult:
        result = await self._load_events()
        if not isinstance(result, FetchOk):
            return result
        events = [e for e in result.records if is_within_range(e, date_from, date_to)]
        logger.info(
            "TheSportsDB: %d events for league %s (%s..%s, %d before window filter)",
            len(events), self._league_id, date_from, date_to, len(result.records),
        )
        return FetchOk(events)

    async def _load_events(self) -> FetchResult:
        if self._rounds:
            collected: list[list[dict[str, Any]]] = []
            for round_id in self._rounds:
                result = await self._fetch_records(
                    self._url("eventsround.php"),
                    params={"id": self._league_id, "s": self._season, "r": round_id},
                )
                if not isinstance(result, FetchOk):
                    return result
                collected.append(result.records)
            return FetchOk(merge_events(*collected))

        if self._season:
            result = await self._fetch_records(
                self._url("eventsseason.php"),
                params={"id": self._league_id, "s": self._season},
            )
            if not isinstance(result, FetchOk) or result.records:
                return result
            logger.warning("TheSportsDB: no season events for %s, falling back to past/next feeds", self._season)

        past = await self._fetch_records(self._url("eventspastleague.php"), params={"id": self._league_id})
        if not isinstance(past, FetchOk):
            return past
        upcoming = await self._fetch_records(self._url("eventsnextleague.php"), params={"id": self._league_id})
        if not isinstance(upcoming, FetchOk):
            return upcoming
        return FetchOk(merge_events(past.records, upcoming.records))
