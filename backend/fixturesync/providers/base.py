"""
backend/fixturesync/providers/base.py

Purpose:
    Provider contract for fixture sources and the explicit fetch outcome type.
    Providers report throttling and failures as values so the orchestrator
    branches on every case instead of inspecting exception attributes.

Dependencies:
    - httpx
    - fixturesync.providers.http_client
    - fixturesync.providers.fetch_cache
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union

import httpx

from fixturesync.providers.fetch_cache import TTLCache, cache_key
from fixturesync.providers.http_client import ResilientClient, parse_retry_after

logger = logging.getLogger("fixturesync.providers")


@dataclass
class FetchOk:
    records: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class FetchRateLimited:
    message: str
    retry_after: float | None = None


@dataclass
class FetchFailed:
    reason: str
    status_code: int | None = None


FetchResult = Union[FetchOk, FetchRateLimited, FetchFailed]


class FixtureProvider(ABC):
    """Fixture source for one tournament; returns raw provider-specific records."""

    name: str = ""

    def __init__(self, client: ResilientClient, cache: TTLCache | None = None) -> None:
        self._client = client
        self._cache = cache if cache is not None else TTLCache()

    @abstractmethod
    async def get_matches_by_date_range(self, date_from: str | None, date_to: str | None) -> FetchResult:
        """Fetch raw records with a kickoff date inside [date_from, date_to] (YYYY-MM-DD)."""
        ...

    @staticmethod
    @abstractmethod
    def extract_records(payload: Any) -> list[dict[str, Any]]:
        """Pull the record list out of one decoded response body."""
        ...

    async def _fetch_records(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        key = cache_key(url, params)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("[%s] cache hit (%d records)", self.name, len(cached))
            return FetchOk(list(cached))

        try:
            resp = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            return FetchFailed(f"{self.name} request failed: {type(exc).__name__}: {exc}")

        if resp.status_code == 429:
            return FetchRateLimited(f"{self.name} rate limit reached.", parse_retry_after(resp))
        if resp.status_code < 200 or resp.status_code >= 300:
            body = (resp.text or "")[:300]
            return FetchFailed(f"{self.name} error {resp.status_code}: {body}", resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            return FetchFailed(f"{self.name} returned invalid JSON: {exc}", resp.status_code)

        records = self.extract_records(payload)
        self._cache.set(key, records)
        return FetchOk(list(records))

    async def aclose(self) -> None:
        await self._client.aclose()
