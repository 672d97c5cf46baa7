"""
backend/fixturesync/services/sync_status_service.py

Purpose:
    Persist the per-tournament sync status record read by operators and
    schedulers. Writes use merge semantics so fields from earlier runs (such
    as lastSuccessAt) survive a failed run.

Dependencies:
    - fixturesync.database
    - fixturesync.models.sync
"""

from __future__ import annotations

import logging
from typing import Any

import fixturesync.database as _db
from fixturesync.models.sync import SyncStatusDocument

logger = logging.getLogger("fixturesync.sync_status")


async def write_sync_status(tournament_id: str, payload: SyncStatusDocument) -> None:
    await _db.db.sync_status.update_one(
        {"_id": tournament_id},
        {"$set": dict(payload)},
        upsert=True,
    )


async def write_sync_status_best_effort(tournament_id: str, payload: SyncStatusDocument) -> None:
    """Failure paths must not mask the original error with a status-write error."""
    try:
        await write_sync_status(tournament_id, payload)
    except Exception:
        logger.warning("Failed to write sync status for %s", tournament_id, exc_info=True)


async def get_sync_status(tournament_id: str) -> dict[str, Any]:
    doc = await _db.db.sync_status.find_one({"_id": tournament_id})
    return dict(doc) if doc else {}
