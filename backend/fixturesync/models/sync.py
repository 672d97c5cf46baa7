"""
backend/fixturesync/models/sync.py

Purpose:
    Contracts around a sync run: the summary returned to callers, the manual
    trigger request, and the persisted status record layout.

Dependencies:
    - pydantic
    - typing
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Literal, TypedDict

from pydantic import BaseModel, model_validator

SyncMode = Literal["manual", "daily", "live"]


class SyncRunStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    RATE_LIMIT = "rate_limit"


class SyncPhase(str, Enum):
    IDLE = "idle"
    LOCKED = "locked"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    COMMITTING = "committing"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncResult(TypedDict):
    created: int
    updated: int
    skipped_manual: int
    skipped_unchanged: int
    skipped_invalid: int
    total: int
    lock_acquired: bool


def empty_sync_result(*, lock_acquired: bool = True) -> SyncResult:
    return {
        "created": 0,
        "updated": 0,
        "skipped_manual": 0,
        "skipped_unchanged": 0,
        "skipped_invalid": 0,
        "total": 0,
        "lock_acquired": lock_acquired,
    }


class SyncStatusDocument(TypedDict, total=False):
    lastRunAt: datetime
    lastSuccessAt: datetime
    syncStatus: str
    syncError: str | None
    failedPhase: str | None
    provider: str
    mode: str
    dateFrom: str | None
    dateTo: str | None
    created: int
    updated: int
    skippedManual: int
    skippedUnchanged: int
    skippedInvalid: int
    totalMatches: int
    durationMs: float


class ManualSyncRequest(BaseModel):
    mode: SyncMode = "manual"
    date_from: date | None = None
    date_to: date | None = None
    allow_manual_overwrite: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> "ManualSyncRequest":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    @property
    def has_range(self) -> bool:
        return self.date_from is not None and self.date_to is not None
