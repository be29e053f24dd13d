"""Tests for the alert ingestion pipeline."""

from datetime import datetime, timedelta, timezone

import pytest

from alarmageddon.core.config import Settings
from alarmageddon.engine.router import RoutingRule
from alarmageddon.models.routing import RoutingAction
from alarmageddon.services import build_services


@pytest.mark.asyncio
async def test_alert_is_delivered_to_default_channel(services, chat, disk_payload: dict) -> None:
    alert = await services.orchestrator.ingest(disk_payload)

    assert not alert.silenced
    assert alert.routing_decision.action == RoutingAction.PASS
    assert alert.routing_decision.destination == "chan-default"
    assert alert.delivered

    assert len(chat.posted) == 1
    channel_id, body = chat.posted[0]
    assert channel_id == "chan-default"
    embed = body["embeds"][0]
    assert embed["title"] == "Disk usage high"
    assert embed["color"] == 0xFF0000
    assert body["components"][0]["components"][0]["custom_id"] == f"ack_{alert.id}"

    stored = await services.alerts.get(alert.id)
    assert stored.message_id == "msg-1"
    assert stored.channel_id == "chan-default"
    assert stored.routing_decision.decision_id == alert.routing_decision.decision_id


@pytest.mark.asyncio
async def test_database_alert_is_redirected(services, chat, database_payload: dict) -> None:
    alert = await services.orchestrator.ingest(database_payload)

    assert alert.routing_decision.action == RoutingAction.REDIRECT
    assert chat.posted[0][0] == "chan-db"
    assert (await services.alerts.get(alert.id)).channel_id == "chan-db"


@pytest.mark.asyncio
async def test_silenced_alert_is_stored_but_not_routed(services, chat, disk_payload: dict) -> None:
    now = datetime.now(timezone.utc)
    silence = await services.silences.create("disk", "10m", "alice", now=now - timedelta(minutes=1))

    alert = await services.orchestrator.ingest(disk_payload)

    assert alert.silenced
    assert alert.silenced_by == silence.id
    assert alert.routing_decision is None
    assert chat.posted == []
    assert await services.router.get_recent_decisions() == []

    stored = await services.alerts.get(alert.id)
    assert stored.silenced
    assert not stored.delivered


@pytest.mark.asyncio
async def test_dropped_alert_is_not_posted(redis, chat, settings, disk_payload: dict) -> None:
    rules = [
        RoutingRule(
            name="drop-all",
            action=RoutingAction.DROP,
            destination=None,
            reason="Maintenance window",
            predicate=lambda alert: True,
        )
    ]
    services = build_services(redis, chat, settings, rules)

    alert = await services.orchestrator.ingest(disk_payload)

    assert alert.routing_decision.action == RoutingAction.DROP
    assert chat.posted == []
    stored = await services.alerts.get(alert.id)
    assert stored.routing_decision.reason == "Maintenance window"
    assert not stored.delivered


@pytest.mark.asyncio
async def test_post_failure_keeps_alert(services, chat, disk_payload: dict) -> None:
    chat.fail_posts = True

    alert = await services.orchestrator.ingest(disk_payload)

    assert not alert.delivered
    stored = await services.alerts.get(alert.id)
    assert stored is not None
    assert stored.message_id is None
    assert stored.channel_id is None


@pytest.mark.asyncio
async def test_no_destination_configured(redis, chat, disk_payload: dict) -> None:
    services = build_services(redis, chat, Settings())

    alert = await services.orchestrator.ingest(disk_payload)

    assert alert.routing_decision.destination is None
    assert chat.posted == []
    assert await services.alerts.get(alert.id) is not None
