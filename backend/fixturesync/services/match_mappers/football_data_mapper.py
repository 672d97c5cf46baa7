"""
backend/fixturesync/services/match_mappers/football_data_mapper.py

Purpose:
    Mapper that transforms football-data.org v4 match payloads into canonical
    MatchRecord drafts.

Dependencies:
    - fixturesync.models.matches
    - fixturesync.services.match_mappers.base
"""

from __future__ import annotations

from typing import Any

from fixturesync.config import PROVIDER_FOOTBALL_DATA
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

STAGE_CODES: dict[str, Stage] = {
    "GROUP_STAGE": Stage.GROUP,
    "LAST_32": Stage.R32,
    "LAST_16": Stage.R16,
    "ROUND_OF_16": Stage.R16,
    "QUARTER_FINALS": Stage.QF,
    "SEMI_FINALS": Stage.SF,
    "THIRD_PLACE": Stage.THIRD_PLACE,
    "FINAL": Stage.FINAL,
}


def _team_name(team: Any) -> str:
    if not isinstance(team, dict):
        return ""
    return str(team.get("name") or team.get("shortName") or "").strip()


def map_football_data_match(raw: dict[str, Any]) -> MatchRecord:
    raw = raw if isinstance(raw, dict) else {}
    stage_raw = str(raw.get("stage") or "").strip().upper()
    stage = STAGE_CODES.get(stage_raw) or infer_stage(None, stage_raw)

    group = extract_group(raw.get("group"))
    if stage is None and group:
        stage = Stage.GROUP

    return MatchRecord(
        external_provider=PROVIDER_FOOTBALL_DATA,
        external_match_id=external_id_of(raw.get("id")),
        home_team=_team_name(raw.get("homeTeam")),
        away_team=_team_name(raw.get("awayTeam")),
        kickoff=normalize_kickoff(raw.get("utcDate")),
        status=translate_status(raw.get("status")),
        score=pick_score(raw.get("score")),
        stage=stage,
        group=group,
        matchday=parse_matchday(stage, raw.get("matchday"), None),
    )
