"""
backend/fixturesync/services/match_sync_service.py

Purpose:
    Reconcile one provider's fixtures with the stored game records of a
    tournament. A run validates configuration, takes the distributed sync lock,
    fetches raw records, maps and pairs them with stored records, plans safe
    minimal writes, commits them in bounded batches and records a status
    document. The lock is released on every exit path.

Dependencies:
    - pymongo.UpdateOne
    - fixturesync.database
    - fixturesync.providers
    - fixturesync.services.match_mappers / match_keys / change_detector
    - fixturesync.services.sync_lock / sync_status_service
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pymongo import UpdateOne

import fixturesync.database as _db
from fixturesync.config import Settings, settings, validate_provider_config
from fixturesync.errors import ProviderFetchError, ProviderRateLimitError, SyncFetchError
from fixturesync.logging_config import log_structured
from fixturesync.models.sync import (
    SyncMode,
    SyncPhase,
    SyncResult,
    SyncRunStatus,
    SyncStatusDocument,
    empty_sync_result,
)
from fixturesync.providers.base import FetchFailed, FetchOk, FetchRateLimited, FixtureProvider
from fixturesync.providers.factory import create_provider
from fixturesync.services.change_detector import plan_write
from fixturesync.services.match_keys import MatchIndex
from fixturesync.services.match_mappers import map_record
from fixturesync.services.sync_lock import SyncLock
from fixturesync.services.sync_status_service import write_sync_status, write_sync_status_best_effort
from fixturesync.utils import utcnow

logger = logging.getLogger("fixturesync.match_sync_service")

_RESULT_KEYS = {
    "create": "created",
    "update": "updated",
    "skip_manual": "skipped_manual",
    "skip_unchanged": "skipped_unchanged",
}


def game_document_id(provider: str, external_match_id: str) -> str:
    return f"{provider}_{external_match_id}"


@dataclass
class SyncRun:
    """Per-run phase tracking; each synchronize() call owns its own instance."""

    phase: SyncPhase = SyncPhase.IDLE

    def enter(self, phase: SyncPhase) -> None:
        logger.debug("sync phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase


class MatchSyncService:
    def __init__(
        self,
        provider: FixtureProvider | None = None,
        *,
        lock: SyncLock | None = None,
        config: Settings | None = None,
    ) -> None:
        self._provider = provider
        self._config = config
        self._lock = lock

    @property
    def config(self) -> Settings:
        return self._config or settings

    def _ensure_provider(self) -> FixtureProvider:
        if self._provider is None:
            self._provider = create_provider(self.config)
        return self._provider

    def _ensure_lock(self) -> SyncLock:
        if self._lock is None:
            self._lock = SyncLock(self.config.SYNC_LOCK_HOLDER or None)
        return self._lock

    async def aclose(self) -> None:
        """Close the provider's HTTP client; a later run builds a fresh provider."""
        provider, self._provider = self._provider, None
        if provider is not None:
            await provider.aclose()

    async def synchronize(
        self,
        *,
        mode: SyncMode,
        date_from: str | None,
        date_to: str | None,
        allow_manual_overwrite: bool = False,
    ) -> SyncResult:
        config = self.config
        validate_provider_config(config)
        provider = self._ensure_provider()
        lock = self._ensure_lock()
        tournament_id = config.TOURNAMENT_ID
        lock_key = config.sync_lock_key

        if not await lock.acquire(lock_key, config.SYNC_LOCK_TTL_SECONDS):
            logger.info("Sync already running for %s (mode=%s). Exiting.", lock_key, mode)
            return empty_sync_result(lock_acquired=False)

        run = SyncRun()
        run.enter(SyncPhase.LOCKED)
        started = time.monotonic()
        now = utcnow()
        base_status: SyncStatusDocument = {
            "lastRunAt": now,
            "provider": provider.name,
            "mode": mode,
            "dateFrom": date_from,
            "dateTo": date_to,
        }

        try:
            raw_records = await self._fetch(run, provider, date_from, date_to, tournament_id, base_status)

            run.enter(SyncPhase.RECONCILING)
            result, operations = await self._reconcile(
                provider.name,
                raw_records,
                tournament_id=tournament_id,
                now=now,
                allow_manual_overwrite=allow_manual_overwrite,
            )

            run.enter(SyncPhase.COMMITTING)
            await self._commit(operations, batch_size=config.SYNC_BATCH_SIZE)

            duration_ms = round((time.monotonic() - started) * 1000, 2)
            await write_sync_status(
                tournament_id,
                {
                    **base_status,
                    "lastSuccessAt": now,
                    "syncStatus": SyncRunStatus.OK.value,
                    "syncError": None,
                    "failedPhase": None,
                    "created": result["created"],
                    "updated": result["updated"],
                    "skippedManual": result["skipped_manual"],
                    "skippedUnchanged": result["skipped_unchanged"],
                    "skippedInvalid": result["skipped_invalid"],
                    "totalMatches": result["total"],
                    "durationMs": duration_ms,
                },
            )
            run.enter(SyncPhase.COMPLETED)
            log_structured(
                logger,
                logging.INFO,
                {
                    "event": "sync_completed",
                    "tournament_id": tournament_id,
                    "provider": provider.name,
                    "mode": mode,
                    "date_from": date_from,
                    "date_to": date_to,
                    "duration_ms": duration_ms,
                    **result,
                },
            )
            return result

        except SyncFetchError:
            run.enter(SyncPhase.FAILED)
            raise
        except Exception as exc:
            failed_phase = run.phase
            run.enter(SyncPhase.FAILED)
            logger.error("Sync failed for %s during %s: %s", tournament_id, failed_phase.value, exc)
            await write_sync_status_best_effort(
                tournament_id,
                {
                    **base_status,
                    "syncStatus": SyncRunStatus.ERROR.value,
                    "syncError": str(exc) or type(exc).__name__,
                    "failedPhase": failed_phase.value,
                },
            )
            raise
        finally:
            try:
                await lock.release(lock_key)
            except Exception:
                logger.error("Failed to release sync lock %s", lock_key, exc_info=True)

    async def _fetch(
        self,
        run: SyncRun,
        provider: FixtureProvider,
        date_from: str | None,
        date_to: str | None,
        tournament_id: str,
        base_status: SyncStatusDocument,
    ) -> list[dict[str, Any]]:
        run.enter(SyncPhase.FETCHING)
        try:
            outcome = await provider.get_matches_by_date_range(date_from, date_to)
        except Exception as exc:
            outcome = FetchFailed(f"{provider.name} fetch crashed: {type(exc).__name__}: {exc}")

        if isinstance(outcome, FetchOk):
            return outcome.records

        if isinstance(outcome, FetchRateLimited):
            error: SyncFetchError = ProviderRateLimitError(
                outcome.message, provider=provider.name, retry_after=outcome.retry_after
            )
        elif isinstance(outcome, FetchFailed):
            error = ProviderFetchError(outcome.reason, provider=provider.name, status_code=outcome.status_code)
        else:
            raise TypeError(f"Unexpected fetch outcome: {type(outcome).__name__}")

        logger.warning("Fetch failed for %s (%s): %s", tournament_id, error.status_value, error)
        await write_sync_status_best_effort(
            tournament_id,
            {
                **base_status,
                "syncStatus": error.status_value,
                "syncError": str(error),
                "failedPhase": SyncPhase.FETCHING.value,
            },
        )
        raise error

    async def _reconcile(
        self,
        provider_name: str,
        raw_records: list[dict[str, Any]],
        *,
        tournament_id: str,
        now: datetime,
        allow_manual_overwrite: bool,
    ) -> tuple[SyncResult, list[UpdateOne]]:
        existing_docs = await _db.db.games.find({"tournamentId": tournament_id}).to_list(length=None)
        index = MatchIndex.from_documents(existing_docs)

        result = empty_sync_result()
        result["total"] = len(raw_records)
        operations: list[UpdateOne] = []
        matched_by_fuzzy = 0

        for raw in raw_records:
            record = map_record(provider_name, raw)
            if not record.external_match_id:
                result["skipped_invalid"] += 1
                logger.warning(
                    "Skipping %s record without external id (%s vs %s)",
                    provider_name, record.home_team or "?", record.away_team or "?",
                )
                continue

            existing, matched_by = index.resolve(record)
            if matched_by == "fuzzy":
                matched_by_fuzzy += 1

            plan = plan_write(
                record,
                existing,
                tournament_id=tournament_id,
                now=now,
                allow_manual_overwrite=allow_manual_overwrite,
            )
            result[_RESULT_KEYS[plan.action]] += 1
            if plan.payload is None:
                continue

            if existing is None:
                doc_id = game_document_id(provider_name, record.external_match_id)
                operations.append(UpdateOne({"_id": doc_id}, {"$set": plan.payload}, upsert=True))
                index.add({"_id": doc_id, **plan.payload})
            else:
                operations.append(UpdateOne({"_id": existing["_id"]}, {"$set": plan.payload}))
                existing.update(plan.payload)
                index.add(existing)

        if matched_by_fuzzy:
            logger.info("%d records paired by team/kickoff key (no stored provenance)", matched_by_fuzzy)
        return result, operations

    async def _commit(self, operations: list[UpdateOne], *, batch_size: int) -> None:
        size = max(1, int(batch_size))
        for start in range(0, len(operations), size):
            chunk = operations[start:start + size]
            await _db.db.games.bulk_write(chunk, ordered=False)
            logger.debug("Committed batch of %d game writes", len(chunk))


match_sync_service = MatchSyncService()
