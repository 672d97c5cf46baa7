"""
backend/fixturesync/services/change_detector.py

Purpose:
    Decide what a sync write may touch on an existing canonical record and
    suppress writes that would change nothing. Rules, in order:

      1. a FINISHED record never regresses to a non-finished status,
      2. score fields are written only for FINISHED records (omitted, never nulled),
      3. unchanged comparable fields turn the write into a no-op skip,
      4. manually edited records only receive sync bookkeeping unless the
         caller explicitly allows overwriting them.

Dependencies:
    - dataclasses
    - fixturesync.models.matches
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from fixturesync.models.matches import (
    SCORE_FIELDS,
    MatchRecord,
    MatchStatus,
    SyncRecordStatus,
    legacy_status_for,
)

WriteAction = Literal["create", "update", "skip_manual", "skip_unchanged"]

COMPARABLE_FIELDS: tuple[str, ...] = (
    "HomeTeam",
    "AwayTeam",
    "KickOffTime",
    "utcDate",
    "Status",
    "status",
    "HomeScore",
    "AwayScore",
    "Stage",
    "Group",
    "Matchday",
    "StageKey",
    "externalProvider",
    "externalMatchId",
    "score",
)


@dataclass
class WritePlan:
    action: WriteAction
    payload: dict[str, Any] | None = None

    @property
    def writes(self) -> bool:
        return self.payload is not None


def sanitize_payload(payload: dict[str, Any], existing: dict[str, Any]) -> dict[str, Any]:
    sanitized = dict(payload)
    existing_status = str(existing.get("status") or "")

    if existing_status == MatchStatus.FINISHED.value and sanitized.get("status") != MatchStatus.FINISHED.value:
        sanitized["status"] = existing_status
        sanitized["Status"] = existing.get("Status") or legacy_status_for(existing_status)
        # Upstream has no result for this fixture any more; keep the stored one.
        for field in SCORE_FIELDS:
            sanitized.pop(field, None)

    if sanitized.get("status") != MatchStatus.FINISHED.value:
        for field in SCORE_FIELDS:
            sanitized.pop(field, None)

    return sanitized


def _normalize(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return str(value)


def changed_fields(payload: dict[str, Any], existing: dict[str, Any]) -> list[str]:
    """Comparable fields present in the payload whose value differs from the stored one."""
    return [
        field
        for field in COMPARABLE_FIELDS
        if field in payload and _normalize(payload[field]) != _normalize(existing.get(field))
    ]


def has_changes(payload: dict[str, Any], existing: dict[str, Any]) -> bool:
    return bool(changed_fields(payload, existing))


def _bookkeeping(now: datetime, tournament_id: str) -> dict[str, Any]:
    return {
        "tournamentId": tournament_id,
        "lastSyncedAt": now,
        "syncStatus": SyncRecordStatus.OK.value,
        "syncError": None,
    }


def plan_write(
    record: MatchRecord,
    existing: dict[str, Any] | None,
    *,
    tournament_id: str,
    now: datetime,
    allow_manual_overwrite: bool = False,
) -> WritePlan:
    proposed = record.to_document()

    if existing is None:
        payload = sanitize_payload(proposed, {})
        payload.update(_bookkeeping(now, tournament_id))
        payload["isManuallyEdited"] = False
        return WritePlan("create", payload)

    sanitized = sanitize_payload(proposed, existing)
    if not has_changes(sanitized, existing):
        return WritePlan("skip_unchanged")

    if existing.get("isManuallyEdited") and not allow_manual_overwrite:
        return WritePlan(
            "skip_manual",
            {"lastSyncedAt": now, "syncStatus": SyncRecordStatus.SKIPPED_MANUAL.value},
        )

    sanitized.update(_bookkeeping(now, tournament_id))
    return WritePlan("update", sanitized)
