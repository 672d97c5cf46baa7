"""
backend/fixturesync/services/match_mappers/thesportsdb_mapper.py

Purpose:
    Mapper that transforms TheSportsDB event payloads (string-typed fields,
    free-text rounds) into canonical MatchRecord drafts.

Dependencies:
    - fixturesync.models.matches
    - fixturesync.services.match_mappers.base
"""

from __future__ import annotations

from typing import Any

from fixturesync.config import PROVIDER_THESPORTSDB
from fixturesync.models.matches import MatchRecord, Stage
from fixturesync.services.match_mappers.base import (
    external_id_of,
    extract_group,
    infer_stage,
    normalize_kickoff,
    parse_matchday,
    pick_score,
    translate_status,
)


def map_thesportsdb_event(raw: dict[str, Any]) -> MatchRecord:
    raw = raw if isinstance(raw, dict) else {}
    round_text = raw.get("strRound") or raw.get("strEvent")
    round_number = raw.get("intRound")

    stage = infer_stage(round_number, round_text)
    group = extract_group(raw.get("strGroup") or round_text)
    if stage is None and group:
        stage = Stage.GROUP

    score = pick_score(
        {
            "fullTime": {"home": raw.get("intHomeScore"), "away": raw.get("intAwayScore")},
        }
    )

    return MatchRecord(
        external_provider=PROVIDER_THESPORTSDB,
        external_match_id=external_id_of(raw.get("idEvent")),
        home_team=str(raw.get("strHomeTeam") or "").strip(),
        away_team=str(raw.get("strAwayTeam") or "").strip(),
        kickoff=normalize_kickoff(raw.get("strTimestamp"), raw.get("dateEvent"), raw.get("strTime")),
        status=translate_status(raw.get("strStatus")),
        score=score,
        stage=stage,
        group=group,
        matchday=parse_matchday(stage, round_number, round_text),
    )
