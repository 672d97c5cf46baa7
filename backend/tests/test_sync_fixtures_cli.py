"""
backend/tests/test_sync_fixtures_cli.py

Purpose:
    tools/sync_fixtures.py dispatch: which trigger runs for which flags, exit
    codes, and that the provider client and database connection are always
    closed.
"""

from __future__ import annotations

import argparse
from datetime import date
import sys

import pytest

sys.path.insert(0, "backend")

from fixturesync.models.sync import empty_sync_result
from tools import sync_fixtures


def _args(**overrides):
    values = {
        "mode": "manual",
        "date_from": None,
        "date_to": None,
        "allow_manual_overwrite": False,
        "live": False,
        "status": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def calls(monkeypatch):
    recorded: list[tuple] = []

    async def _connect():
        recorded.append(("connect",))

    async def _close():
        recorded.append(("close",))

    async def _manual(request):
        recorded.append(("manual", request))
        return empty_sync_result()

    async def _daily():
        recorded.append(("daily",))
        return empty_sync_result()

    async def _live():
        recorded.append(("live",))
        return None

    class _Service:
        async def aclose(self):
            recorded.append(("aclose",))

    monkeypatch.setattr(sync_fixtures, "connect_db", _connect)
    monkeypatch.setattr(sync_fixtures, "close_db", _close)
    monkeypatch.setattr(sync_fixtures, "run_manual_sync", _manual)
    monkeypatch.setattr(sync_fixtures, "sync_daily_fixtures", _daily)
    monkeypatch.setattr(sync_fixtures, "sync_live_matches", _live)
    monkeypatch.setattr(sync_fixtures, "match_sync_service", _Service())
    return recorded


@pytest.mark.asyncio
async def test_manual_run_builds_request(calls):
    code = await sync_fixtures.run(
        _args(date_from=date(2026, 6, 10), date_to=date(2026, 6, 20), allow_manual_overwrite=True)
    )

    assert code == 0
    assert calls[0] == ("connect",)
    _, request = calls[1]
    assert request.mode == "manual"
    assert request.date_from == date(2026, 6, 10)
    assert request.allow_manual_overwrite is True
    assert calls[-1] == ("close",)


@pytest.mark.asyncio
async def test_daily_mode_uses_daily_trigger(calls):
    assert await sync_fixtures.run(_args(mode="daily")) == 0
    assert [c[0] for c in calls] == ["connect", "daily", "aclose", "close"]


@pytest.mark.asyncio
async def test_skipped_live_run_exits_non_zero(calls):
    assert await sync_fixtures.run(_args(live=True)) == 1
    assert [c[0] for c in calls] == ["connect", "live", "aclose", "close"]


@pytest.mark.asyncio
async def test_errors_still_close_connection(calls, monkeypatch):
    async def _boom(request):
        raise RuntimeError("upstream down")

    monkeypatch.setattr(sync_fixtures, "run_manual_sync", _boom)

    with pytest.raises(RuntimeError):
        await sync_fixtures.run(_args())
    assert calls[-2:] == [("aclose",), ("close",)]
