"""Run one fixture sync against the configured provider.

Usage:
    python -m tools.sync_fixtures
    python -m tools.sync_fixtures --mode daily
    python -m tools.sync_fixtures --date-from 2026-06-10 --date-to 2026-06-20
    python -m tools.sync_fixtures --live --allow-manual-overwrite
"""

import argparse
import asyncio
import json
import sys
from datetime import date

sys.path.insert(0, "backend")

from fixturesync.config import settings
from fixturesync.database import close_db, connect_db
from fixturesync.logging_config import setup_logging
from fixturesync.models.sync import ManualSyncRequest
from fixturesync.services.match_sync_service import match_sync_service
from fixturesync.services.sync_status_service import get_sync_status
from fixturesync.workers.fixture_sync import (
    run_manual_sync,
    sync_daily_fixtures,
    sync_live_matches,
)


async def run(args: argparse.Namespace) -> int:
    await connect_db()
    try:
        if args.status:
            print(json.dumps(await get_sync_status(settings.TOURNAMENT_ID), default=str, indent=2))
            return 0
        if args.live:
            result = await sync_live_matches()
        elif args.mode == "daily":
            result = await sync_daily_fixtures()
        else:
            result = await run_manual_sync(
                ManualSyncRequest(
                    mode=args.mode,
                    date_from=args.date_from,
                    date_to=args.date_to,
                    allow_manual_overwrite=args.allow_manual_overwrite,
                )
            )
        print(json.dumps(result, indent=2) if result is not None else "No sync performed.")
        return 0 if result is not None else 1
    finally:
        await match_sync_service.aclose()
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="Reconcile provider fixtures into the games collection.")
    parser.add_argument("--mode", choices=["manual", "daily", "live"], default="manual")
    parser.add_argument("--date-from", type=date.fromisoformat, default=None)
    parser.add_argument("--date-to", type=date.fromisoformat, default=None)
    parser.add_argument("--allow-manual-overwrite", action="store_true")
    parser.add_argument("--live", action="store_true", help="Run the live sync with its kickoff pre-check.")
    parser.add_argument("--status", action="store_true", help="Print the stored sync status and exit.")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
