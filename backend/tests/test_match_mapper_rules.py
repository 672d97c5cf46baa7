"""
backend/tests/test_match_mapper_rules.py

Purpose:
    Shared normalization rules: status translation, stage/group inference,
    stage key construction, and the canonical record invariants.
"""

from __future__ import annotations

import sys

import pytest

sys.path.insert(0, "backend")

from fixturesync.models.matches import (
    MatchRecord,
    MatchScore,
    MatchStatus,
    Stage,
    build_stage_key,
    legacy_status_for,
)
from fixturesync.services.match_mappers import map_record
from fixturesync.services.match_mappers.base import (
    extract_group,
    infer_stage,
    normalize_kickoff,
    parse_int,
    parse_matchday,
    translate_status,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("FINISHED", MatchStatus.FINISHED),
        ("FT", MatchStatus.FINISHED),
        ("AET", MatchStatus.FINISHED),
        ("PEN", MatchStatus.FINISHED),
        ("Match Finished", MatchStatus.FINISHED),
        ("IN_PLAY", MatchStatus.IN_PLAY),
        ("LIVE", MatchStatus.IN_PLAY),
        ("1H", MatchStatus.IN_PLAY),
        ("In Progress", MatchStatus.IN_PLAY),
        ("PAUSED", MatchStatus.PAUSED),
        ("HT", MatchStatus.PAUSED),
        ("Half Time", MatchStatus.PAUSED),
        ("TIMED", MatchStatus.SCHEDULED),
        ("Not Started", MatchStatus.SCHEDULED),
        ("", MatchStatus.SCHEDULED),
        (None, MatchStatus.SCHEDULED),
    ],
)
def test_translate_status(raw, expected):
    assert translate_status(raw) == expected


def test_legacy_status_is_derived_from_status():
    assert legacy_status_for(MatchStatus.SCHEDULED) == "upcoming"
    assert legacy_status_for(MatchStatus.IN_PLAY) == "live"
    assert legacy_status_for(MatchStatus.PAUSED) == "live"
    assert legacy_status_for(MatchStatus.FINISHED) == "finished"
    assert legacy_status_for("finished") == "finished"
    assert legacy_status_for(None) == "upcoming"


def test_stage_key_is_deterministic():
    assert build_stage_key(Stage.GROUP, "A", 1) == "GROUP-A-MD1"
    assert build_stage_key(Stage.GROUP, "A", None) is None
    assert build_stage_key(Stage.GROUP, None, 2) is None
    assert build_stage_key(Stage.THIRD_PLACE, None, None) == "3P"
    assert build_stage_key(None, "A", 1) is None


def test_infer_stage_prefers_round_number():
    assert infer_stage("125", "Group stage") == Stage.QF
    assert infer_stage("150", None) == Stage.SF
    assert infer_stage("160", None) == Stage.THIRD_PLACE
    assert infer_stage(16, None) == Stage.R16
    assert infer_stage(None, "round_of_16") == Stage.R16
    assert infer_stage(None, "Semi-final") == Stage.SF
    assert infer_stage(None, "Friendly") is None
    assert infer_stage(None, None) is None


def test_extract_group():
    assert extract_group("Group A") == "A"
    assert extract_group("GROUP_H") == "H"
    assert extract_group("group-c") == "C"
    assert extract_group("d") == "D"
    assert extract_group("Group Stage") is None
    assert extract_group(None) is None


def test_parse_matchday_only_for_group_stage():
    assert parse_matchday(Stage.GROUP, "3", None) == 3
    assert parse_matchday(Stage.GROUP, None, "Round 2") == 2
    assert parse_matchday(Stage.GROUP, None, "Matchday 7") is None
    assert parse_matchday(Stage.QF, 1, "Matchday 1") is None


def test_parse_int():
    assert parse_int("4") == 4
    assert parse_int(4.0) == 4
    assert parse_int(True) is None
    assert parse_int("x") is None
    assert parse_int("") is None


def test_normalize_kickoff():
    assert normalize_kickoff("2026-06-10T18:00:00Z") == "2026-06-10T18:00:00Z"
    assert normalize_kickoff(None, "2026-06-10", "18:00:00+01:00") == "2026-06-10T17:00:00Z"
    assert normalize_kickoff(None, "2026-06-10") == "2026-06-10T00:00:00Z"
    assert normalize_kickoff("not a date") is None
    assert normalize_kickoff() is None


def test_record_clears_group_fields_outside_group_stage():
    record = MatchRecord(external_provider="x", stage=Stage.R16, group="A", matchday=1)

    assert record.group is None
    assert record.matchday is None
    assert record.stage_key == "R16"


def test_record_clears_score_unless_finished():
    record = MatchRecord(
        external_provider="x",
        status=MatchStatus.PAUSED,
        score=MatchScore(home=1, away=0),
    )

    assert record.score is None
    assert "score" not in record.to_document()


def test_unknown_provider_has_no_mapper():
    with pytest.raises(ValueError):
        map_record("openligadb", {})
