"""
backend/fixturesync/providers/fetch_cache.py

Purpose:
    Short-TTL in-memory response cache owned by one provider instance. Absorbs
    bursts of near-simultaneous runs (scheduler tick plus admin trigger)
    without a second upstream call.
"""

from __future__ import annotations

import time
from typing import Any, Mapping


def cache_key(url: str, params: Mapping[str, Any] | None = None) -> str:
    """Fully-resolved request identity: URL plus sorted query params."""
    if not params:
        return url
    query = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] is not None)
    return f"{url}?{query}" if query else url


class TTLCache:
    def __init__(self, ttl_seconds: float = 20.0) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if (time.monotonic() - stored_at) >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = (time.monotonic(), value)
