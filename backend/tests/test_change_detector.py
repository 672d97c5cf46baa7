"""
backend/tests/test_change_detector.py

Purpose:
    Write planning for one draft against its stored record: creates, no-op
    skips, manual-edit protection, finished-status guard and score omission.
"""

from __future__ import annotations

from datetime import datetime, timezone
import sys

sys.path.insert(0, "backend")

from fixturesync.models.matches import MatchRecord, MatchScore, MatchStatus, Stage
from fixturesync.services.change_detector import changed_fields, plan_write, sanitize_payload

NOW = datetime(2026, 6, 10, 12, 0, tzinfo=timezone.utc)


def _record(**overrides):
    data = {
        "external_provider": "thesportsdb",
        "external_match_id": "123",
        "home_team": "Argentina",
        "away_team": "Brazil",
        "kickoff": "2026-06-10T18:00:00Z",
        "status": MatchStatus.SCHEDULED,
        "stage": Stage.GROUP,
        "group": "A",
        "matchday": 1,
    }
    data.update(overrides)
    return MatchRecord(**data)


def _finished_record(**overrides):
    return _record(status=MatchStatus.FINISHED, score=MatchScore(home=2, away=1), **overrides)


def _stored(record: MatchRecord, **overrides):
    doc = {"_id": "thesportsdb_123", "tournamentId": "WC", "isManuallyEdited": False, **record.to_document()}
    doc.update(overrides)
    return doc


def _plan(record, existing, allow_manual_overwrite=False):
    return plan_write(
        record,
        existing,
        tournament_id="WC",
        now=NOW,
        allow_manual_overwrite=allow_manual_overwrite,
    )


def test_create_carries_bookkeeping_and_no_score_for_scheduled():
    plan = _plan(_record(), None)

    assert plan.action == "create"
    assert plan.payload["tournamentId"] == "WC"
    assert plan.payload["lastSyncedAt"] == NOW
    assert plan.payload["syncStatus"] == "ok"
    assert plan.payload["syncError"] is None
    assert plan.payload["isManuallyEdited"] is False
    assert plan.payload["StageKey"] == "GROUP-A-MD1"
    for field in ("score", "HomeScore", "AwayScore"):
        assert field not in plan.payload


def test_create_finished_record_writes_scores():
    plan = _plan(_finished_record(), None)

    assert plan.action == "create"
    assert plan.payload["HomeScore"] == 2
    assert plan.payload["AwayScore"] == 1


def test_identical_record_is_skipped_without_payload():
    record = _finished_record()
    plan = _plan(record, _stored(record))

    assert plan.action == "skip_unchanged"
    assert plan.payload is None
    assert not plan.writes


def test_scalar_comparison_ignores_type_drift():
    record = _record()
    stored = _stored(record, Matchday="1")

    assert changed_fields(sanitize_payload(record.to_document(), stored), stored) == []


def test_result_update_is_written():
    stored = _stored(_record())
    plan = _plan(_finished_record(), stored)

    assert plan.action == "update"
    assert plan.payload["status"] == "FINISHED"
    assert plan.payload["Status"] == "finished"
    assert plan.payload["HomeScore"] == 2
    assert plan.payload["lastSyncedAt"] == NOW
    assert "isManuallyEdited" not in plan.payload


def test_finished_record_never_regresses():
    stored = _stored(_finished_record())
    plan = _plan(_record(kickoff="2026-06-11T18:00:00Z"), stored)

    assert plan.action == "update"
    assert plan.payload["status"] == "FINISHED"
    assert plan.payload["Status"] == "finished"
    assert plan.payload["utcDate"] == "2026-06-11T18:00:00Z"
    for field in ("score", "HomeScore", "AwayScore"):
        assert field not in plan.payload


def test_finished_record_with_only_status_regression_is_unchanged():
    stored = _stored(_finished_record())
    plan = _plan(_record(), stored)

    assert plan.action == "skip_unchanged"


def test_manual_finished_record_only_gets_bookkeeping():
    stored = _stored(_finished_record(), isManuallyEdited=True)
    plan = _plan(_record(kickoff="2026-06-12T20:00:00Z", home_team="Argentina B"), stored)

    assert plan.action == "skip_manual"
    assert plan.payload == {"lastSyncedAt": NOW, "syncStatus": "skipped_manual"}


def test_manual_record_can_be_overwritten_when_allowed():
    stored = _stored(_record(), isManuallyEdited=True, HomeTeam="Argentinia")
    plan = _plan(_record(), stored, allow_manual_overwrite=True)

    assert plan.action == "update"
    assert plan.payload["HomeTeam"] == "Argentina"
    assert "isManuallyEdited" not in plan.payload


def test_manual_record_without_changes_is_unchanged():
    record = _record()
    plan = _plan(record, _stored(record, isManuallyEdited=True))

    assert plan.action == "skip_unchanged"
    assert plan.payload is None
