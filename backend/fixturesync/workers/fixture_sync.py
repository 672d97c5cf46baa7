"""
backend/fixturesync/workers/fixture_sync.py

Purpose:
    Entry points that start a sync run: the daily fixture sweep, the
    per-minute live sync (skipped unless a stored fixture is near kickoff)
    and the admin-triggered manual sync.

Dependencies:
    - fixturesync.services.match_sync_service
    - fixturesync.database
"""

import logging
from datetime import datetime, timedelta

import fixturesync.database as _db
from fixturesync.config import settings
from fixturesync.errors import ProviderRateLimitError
from fixturesync.models.matches import MatchStatus
from fixturesync.models.sync import ManualSyncRequest, SyncResult
from fixturesync.services.match_sync_service import match_sync_service
from fixturesync.utils import parse_utc, to_iso_date, utcnow

logger = logging.getLogger("fixturesync.workers.fixture_sync")


def build_date_window(now: datetime, days_ahead: int) -> tuple[str, str]:
    """Yesterday through ``days_ahead`` days from now, as YYYY-MM-DD strings."""
    return to_iso_date(now - timedelta(days=1)), to_iso_date(now + timedelta(days=days_ahead))


async def should_sync_live(now: datetime | None = None) -> bool:
    """True when any unfinished stored fixture kicks off inside the live window."""
    now = now or utcnow()
    window_start = now - timedelta(hours=settings.LIVE_WINDOW_BEFORE_HOURS)
    window_end = now + timedelta(hours=settings.LIVE_WINDOW_AFTER_HOURS)

    docs = await _db.db.games.find(
        {"tournamentId": settings.TOURNAMENT_ID},
        {"status": 1, "Status": 1, "utcDate": 1, "KickOffTime": 1},
    ).to_list(length=None)

    for doc in docs:
        status = str(doc.get("status") or doc.get("Status") or "").upper()
        if status == MatchStatus.FINISHED.value:
            continue
        kickoff_raw = doc.get("utcDate") or doc.get("KickOffTime")
        if not kickoff_raw:
            continue
        try:
            kickoff = parse_utc(kickoff_raw)
        except (TypeError, ValueError):
            continue
        if window_start <= kickoff <= window_end:
            return True
    return False


async def sync_daily_fixtures() -> SyncResult | None:
    """Scheduled once a day: refresh the long fixture window."""
    date_from, date_to = build_date_window(utcnow(), settings.FIXTURE_DAYS_AHEAD)
    logger.info("Running daily fixture sync %s..%s", date_from, date_to)
    try:
        return await match_sync_service.synchronize(mode="daily", date_from=date_from, date_to=date_to)
    except Exception as e:
        logger.error("Daily fixture sync failed: %s", e)
        return None


async def sync_live_matches() -> SyncResult | None:
    """Scheduled every minute: sync only while a fixture is live or imminent."""
    if not await should_sync_live():
        logger.info("Skipping live sync (no upcoming or live matches).")
        return None

    date_from, date_to = build_date_window(utcnow(), settings.LIVE_SYNC_DAYS_AHEAD)
    logger.info("Running live sync %s..%s", date_from, date_to)
    try:
        return await match_sync_service.synchronize(mode="live", date_from=date_from, date_to=date_to)
    except ProviderRateLimitError as e:
        # Throttling is expected during busy match windows; the status record already says so.
        logger.warning("Live sync rate limited: %s", e)
        return None
    except Exception as e:
        logger.error("Live sync failed: %s", e)
        return None


async def run_manual_sync(request: ManualSyncRequest) -> SyncResult:
    """Admin entrypoint: errors propagate to the caller."""
    if request.has_range:
        date_from, date_to = request.date_from.isoformat(), request.date_to.isoformat()
    else:
        date_from, date_to = build_date_window(utcnow(), settings.LIVE_SYNC_DAYS_AHEAD)

    return await match_sync_service.synchronize(
        mode=request.mode,
        date_from=date_from,
        date_to=date_to,
        allow_manual_overwrite=request.allow_manual_overwrite,
    )
