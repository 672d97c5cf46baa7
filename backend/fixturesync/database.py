"""
backend/fixturesync/database.py

Purpose:
    MongoDB connection bootstrap and index management for the collections the
    sync engine owns: games, sync_locks, sync_status.

Dependencies:
    - motor.motor_asyncio
    - pymongo
    - fixturesync.config
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, OperationFailure

from fixturesync.config import settings

client: AsyncIOMotorClient = None
db: AsyncIOMotorDatabase = None

logger = logging.getLogger("fixturesync.database")


async def connect_db() -> None:
    global client, db
    client = AsyncIOMotorClient(
        settings.MONGO_URI,
        maxPoolSize=10,
        minPoolSize=1,
    )
    db = client[settings.MONGO_DB]
    await _ensure_indexes()


async def close_db() -> None:
    global client
    if client:
        client.close()


async def _ensure_indexes() -> None:
    """Create indexes on startup. Idempotent, safe to run repeatedly."""

    # ---- Games ----
    await db.games.create_index("tournamentId")
    await db.games.create_index([("tournamentId", 1), ("utcDate", 1)])

    # One canonical record per provider/external id. Manual records without
    # provenance are excluded by the partial filter.
    provenance_key = [("externalProvider", 1), ("externalMatchId", 1)]
    try:
        await db.games.create_index(
            provenance_key,
            unique=True,
            partialFilterExpression={
                "externalProvider": {"$type": "string"},
                "externalMatchId": {"$type": "string", "$gt": ""},
            },
        )
    except (DuplicateKeyError, OperationFailure) as exc:
        logger.warning(
            "Skipped unique provenance index on games due to duplicate data: %s",
            exc,
        )
        await db.games.create_index(provenance_key, name="provenance_lookup", unique=False)

    # ---- Sync locks / status ----
    # Both are keyed by _id (lock key / tournament id); expiresAt is read
    # inside the atomic acquire filter only.
    await db.sync_locks.create_index("expiresAt", sparse=True)
