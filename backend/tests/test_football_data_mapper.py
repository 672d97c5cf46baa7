"""
backend/tests/test_football_data_mapper.py

Purpose:
    football-data.org v4 match mapping: stage codes, group parsing, matchday
    range, and score fallback chain.
"""

from __future__ import annotations

import sys

sys.path.insert(0, "backend")

from fixturesync.models.matches import MatchStatus, Stage
from fixturesync.services.match_mappers.football_data_mapper import map_football_data_match


def _match(**overrides):
    match = {
        "id": 498120,
        "utcDate": "2026-06-11T19:00:00Z",
        "status": "TIMED",
        "matchday": 1,
        "stage": "GROUP_STAGE",
        "group": "GROUP_B",
        "homeTeam": {"id": 769, "name": "Mexico", "shortName": "Mexico"},
        "awayTeam": {"id": 774, "name": "South Africa", "shortName": "South Africa"},
        "score": {
            "winner": None,
            "duration": "REGULAR",
            "fullTime": {"home": None, "away": None},
            "halfTime": {"home": None, "away": None},
        },
    }
    match.update(overrides)
    return match


def test_scheduled_group_match():
    record = map_football_data_match(_match())

    assert record.external_provider == "football-data"
    assert record.external_match_id == "498120"
    assert record.home_team == "Mexico"
    assert record.away_team == "South Africa"
    assert record.kickoff == "2026-06-11T19:00:00Z"
    assert record.status == MatchStatus.SCHEDULED
    assert record.stage == Stage.GROUP
    assert record.group == "B"
    assert record.matchday == 1
    assert record.stage_key == "GROUP-B-MD1"
    assert record.score is None


def test_finished_match_carries_full_time_score():
    record = map_football_data_match(
        _match(
            status="FINISHED",
            score={
                "fullTime": {"home": 3, "away": 0},
                "halfTime": {"home": 1, "away": 0},
            },
        )
    )
    doc = record.to_document()

    assert doc["status"] == "FINISHED"
    assert doc["Status"] == "finished"
    assert doc["HomeScore"] == 3
    assert doc["AwayScore"] == 0
    assert doc["score"]["halfTime"] == {"home": 1, "away": 0}


def test_score_falls_back_to_regular_time():
    record = map_football_data_match(
        _match(
            status="FINISHED",
            stage="QUARTER_FINALS",
            group=None,
            score={
                "fullTime": {"home": None, "away": None},
                "regularTime": {"home": 1, "away": 1},
                "penalties": {"home": 4, "away": 3},
            },
        )
    )

    assert record.home_score == 1
    assert record.away_score == 1
    assert record.stage == Stage.QF
    assert record.stage_key == "QF"


def test_knockout_codes():
    assert map_football_data_match(_match(stage="LAST_32", group=None)).stage == Stage.R32
    assert map_football_data_match(_match(stage="LAST_16", group=None)).stage == Stage.R16
    assert map_football_data_match(_match(stage="SEMI_FINALS", group=None)).stage == Stage.SF
    assert map_football_data_match(_match(stage="THIRD_PLACE", group=None)).stage == Stage.THIRD_PLACE
    assert map_football_data_match(_match(stage="FINAL", group=None)).stage == Stage.FINAL


def test_matchday_outside_group_range_is_dropped():
    record = map_football_data_match(_match(matchday=5))

    assert record.stage == Stage.GROUP
    assert record.matchday is None
    assert record.stage_key is None


def test_live_statuses():
    assert map_football_data_match(_match(status="IN_PLAY")).status == MatchStatus.IN_PLAY
    assert map_football_data_match(_match(status="PAUSED")).status == MatchStatus.PAUSED
    assert map_football_data_match(_match(status="POSTPONED")).status == MatchStatus.SCHEDULED


def test_team_name_falls_back_to_short_name():
    record = map_football_data_match(_match(homeTeam={"shortName": "Korea"}, awayTeam=None))

    assert record.home_team == "Korea"
    assert record.away_team == ""
