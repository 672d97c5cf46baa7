"""
backend/fixturesync/services/match_keys.py

Purpose:
    Lookup keys used to pair an incoming draft with an existing canonical
    record: the provenance key (provider + external id) and the fuzzy key
    (normalized teams + minute-exact kickoff).

Notes:
    - The provenance key always wins.
    - The fuzzy key only pairs with records carrying no conflicting provenance,
      e.g. fixtures created by hand before the provider knew them. A stored record
      carrying a different id from the same provider is a different fixture.
"""

from __future__ import annotations

from typing import Any, Literal

from fixturesync.models.matches import MatchRecord
from fixturesync.utils import ensure_utc, parse_utc
from fixturesync.utils.team_matching import normalize_team_name

MatchedBy = Literal["external", "fuzzy"]


def external_key(provider: str | None, external_match_id: str | None) -> str | None:
    provider = str(provider or "").strip()
    external_match_id = str(external_match_id or "").strip()
    if not provider or not external_match_id:
        return None
    return f"{provider}:{external_match_id}"


def fuzzy_key(home_team: str | None, away_team: str | None, kickoff: Any) -> str | None:
    home = normalize_team_name(home_team)
    away = normalize_team_name(away_team)
    if not home or not away or not kickoff:
        return None
    try:
        moment = parse_utc(kickoff)
    except (TypeError, ValueError):
        return None
    return f"{home}|{away}|{ensure_utc(moment).strftime('%Y-%m-%dT%H:%MZ')}"


def document_fuzzy_key(doc: dict[str, Any]) -> str | None:
    return fuzzy_key(doc.get("HomeTeam"), doc.get("AwayTeam"), doc.get("utcDate") or doc.get("KickOffTime"))


class MatchIndex:
    """In-memory index of one tournament's stored records, keyed both ways."""

    def __init__(self) -> None:
        self._by_external: dict[str, dict[str, Any]] = {}
        self._by_fuzzy: dict[str, dict[str, Any]] = {}

    @classmethod
    def from_documents(cls, docs: list[dict[str, Any]]) -> "MatchIndex":
        index = cls()
        for doc in docs:
            index.add(doc)
        return index

    def __len__(self) -> int:
        ids = {id(doc) for doc in self._by_external.values()}
        ids.update(id(doc) for doc in self._by_fuzzy.values())
        return len(ids)

    def add(self, doc: dict[str, Any]) -> None:
        ext = external_key(doc.get("externalProvider"), doc.get("externalMatchId"))
        if ext:
            self._by_external[ext] = doc
        fuzzy = document_fuzzy_key(doc)
        if fuzzy:
            self._by_fuzzy[fuzzy] = doc

    def resolve(self, record: MatchRecord) -> tuple[dict[str, Any] | None, MatchedBy | None]:
        ext = external_key(record.external_provider, record.external_match_id)
        if ext and ext in self._by_external:
            return self._by_external[ext], "external"

        fuzzy = fuzzy_key(record.home_team, record.away_team, record.kickoff)
        if not fuzzy:
            return None, None
        candidate = self._by_fuzzy.get(fuzzy)
        if candidate is None or not self._is_adoptable(candidate, record):
            return None, None
        return candidate, "fuzzy"

    @staticmethod
    def _is_adoptable(doc: dict[str, Any], record: MatchRecord) -> bool:
        if str(doc.get("externalProvider") or "") != record.external_provider:
            return True
        stored_id = str(doc.get("externalMatchId") or "").strip()
        return not stored_id or stored_id == record.external_match_id
