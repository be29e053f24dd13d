"""Tests for the retention sweep."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from alarmageddon.core.config import Settings
from alarmageddon.models.alert import Alert
from alarmageddon.models.routing import RoutingAction, RoutingDecision
from alarmageddon.services import build_services

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def alert_at(alert_id: str, received_at: datetime) -> Alert:
    return Alert(
        id=alert_id,
        timestamp=int(received_at.timestamp() * 1000),
        received_at=received_at,
        payload={"title": "Disk usage high"},
    )


@pytest.mark.asyncio
async def test_sweep_deletes_aged_records(services) -> None:
    old = NOW - timedelta(days=31)
    await services.alerts.save(alert_at("alert_old", old))
    await services.alerts.save(alert_at("alert_new", NOW - timedelta(days=1)))
    await services.routing_store.save(
        RoutingDecision(alert_id="alert_old", action=RoutingAction.PASS, reason="old", timestamp=old)
    )
    await services.routing_store.save(
        RoutingDecision(alert_id="alert_new", action=RoutingAction.PASS, reason="new", timestamp=NOW)
    )
    await services.silences.create("disk", "1h", "alice", now=NOW - timedelta(hours=2))

    result = await services.sweeper.sweep(now=NOW)

    assert result.alerts_deleted == 1
    assert result.routing_deleted == 1
    assert result.silences_expired == 1
    assert result.changed
    assert await services.alerts.get("alert_old") is None
    assert await services.alerts.get("alert_new") is not None
    assert [decision.alert_id for decision in await services.routing_store.list_recent()] == ["alert_new"]


@pytest.mark.asyncio
async def test_sweep_without_changes(services) -> None:
    await services.alerts.save(alert_at("alert_new", NOW))

    result = await services.sweeper.sweep(now=NOW)

    assert not result.changed


@pytest.mark.asyncio
async def test_expire_silences(services) -> None:
    silence = await services.silences.create("disk", "10m", "alice", now=NOW)

    assert await services.sweeper.expire_silences(now=NOW + timedelta(minutes=5)) == 0
    assert await services.sweeper.expire_silences(now=NOW + timedelta(minutes=11)) == 1
    assert not (await services.silence_store.get(silence.id)).active


@pytest.mark.asyncio
async def test_background_loops_run_at_start(redis, chat) -> None:
    services = build_services(redis, chat, Settings(retention_days=1))
    stale = datetime.now(timezone.utc) - timedelta(days=2)
    await services.alerts.save(alert_at("alert_stale", stale))

    services.sweeper.start()
    try:
        for _ in range(50):
            if await services.alerts.get("alert_stale") is None:
                break
            await asyncio.sleep(0.01)
    finally:
        await services.sweeper.stop()

    assert await services.alerts.get("alert_stale") is None
