"""
backend/fixturesync/providers/football_data.py

Purpose:
    football-data.org v4 fixture source. One competition endpoint filtered by
    date window; the response body's ``matches`` list is returned untouched
    for the mapper.

Dependencies:
    - fixturesync.providers.base
    - fixturesync.providers.http_client
"""

from __future__ import annotations

import logging
from typing import Any

from fixturesync.config import PROVIDER_FOOTBALL_DATA
from fixturesync.providers.base import FetchOk, FetchResult, FixtureProvider
from fixturesync.providers.fetch_cache import TTLCache
from fixturesync.providers.http_client import ResilientClient

logger = logging.getLogger("fixturesync.football_data")


class FootballDataProvider(FixtureProvider):
    name = PROVIDER_FOOTBALL_DATA

    def __init__(
        self,
        *,
        token: str,
        competition_id: str,
        base_url: str = "https://api.football-data.org/v4",
        client: ResilientClient | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        super().__init__(client or ResilientClient("football_data"), cache)
        self._token = token
        self._competition_id = competition_id
        self._base_url = base_url.rstrip("/")

    @staticmethod
    def extract_records(payload: Any) -> list[dict[str, Any]]:
        matches = payload.get("matches") if isinstance(payload, dict) else None
        return [m for m in matches if isinstance(m, dict)] if isinstance(matches, list) else []

    async def get_matches_by_date_range(self, date_from: str | None, date_to: str | None) -> FetchResult:
        params: dict[str, Any] = {}
        if date_from:
            params["dateFrom"] = date_from
        if date_to:
            params["dateTo"] = date_to

        result = await self._fetch_records(
            f"{self._base_url}/competitions/{self._competition_id}/matches",
            params=params,
            headers={"X-Auth-Token": self._token},
        )
        if isinstance(result, FetchOk):
            logger.info(
                "football-data.org: %d matches for %s (%s..%s)",
                len(result.records), self._competition_id, date_from, date_to,
            )
        return result
