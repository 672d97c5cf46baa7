"""
backend/fixturesync/services/sync_lock.py

Purpose:
    TTL-based mutual exclusion between sync runs that may be scheduled at the
    same time (scheduler tick plus an admin trigger). The lock document lives
    in the shared store so it holds across processes and hosts.

Dependencies:
    - pymongo
    - fixturesync.database
"""

from __future__ import annotations

import logging
import os
import socket
import uuid
from datetime import timedelta

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

import fixturesync.database as _db
from fixturesync.utils import utcnow

logger = logging.getLogger("fixturesync.sync_lock")


def default_holder() -> str:
    return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:8]}"


class SyncLock:
    """Lock documents in ``sync_locks`` keyed by ``_id``; released locks keep their document."""

    def __init__(self, holder: str | None = None) -> None:
        self.holder = holder or default_holder()

    async def acquire(self, key: str, ttl_seconds: float) -> bool:
        """Atomically take the lock when it is absent or expired.

        The read and the write happen in one find_one_and_update: the filter
        only matches a free lock, and when a live lock exists the upsert
        collides on ``_id`` instead of overwriting it.
        """
        now = utcnow()
        try:
            doc = await _db.db.sync_locks.find_one_and_update(
                {
                    "_id": key,
                    "$or": [
                        {"expiresAt": None},
                        {"expiresAt": {"$lte": now}},
                    ],
                },
                {
                    "$set": {
                        "lockedAt": now,
                        "expiresAt": now + timedelta(seconds=max(1.0, float(ttl_seconds))),
                        "lockedBy": self.holder,
                    }
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.info("Sync lock %s is held by another run", key)
            return False
        return bool(doc) and doc.get("lockedBy") == self.holder

    async def release(self, key: str) -> None:
        """Clear the lock fields if this holder still owns the lock."""
        result = await _db.db.sync_locks.update_one(
            {"_id": key, "lockedBy": self.holder},
            {"$set": {"lockedAt": None, "expiresAt": None, "lockedBy": None}},
        )
        if getattr(result, "matched_count", 1) == 0:
            logger.warning("Sync lock %s was no longer held by %s at release", key, self.holder)
