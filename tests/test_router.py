"""Tests for alert routing."""

import pytest

from alarmageddon.core.config import Settings
from alarmageddon.engine.router import DEFAULT_REASON, AlertRouter, RoutingRule, is_database_alert
from alarmageddon.models.alert import Alert
from alarmageddon.models.routing import RoutingAction
from alarmageddon.storage.routing_store import RoutingDecisionStore


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"service": "database"}, True),
        ({"service": "Database"}, True),
        ({"title": "Database connections exhausted"}, True),
        ({"title": "High DB latency"}, True),
        ({"subject": "dbwriter stuck"}, True),
        ({"service": "databases", "title": "queue full"}, False),
        ({"title": "Disk usage high", "description": "db volume"}, False),
    ],
)
def test_is_database_alert(payload: dict, expected: bool) -> None:
    assert is_database_alert(Alert.new(payload)) is expected


def test_database_alert_redirects_to_db_channel(settings: Settings, database_payload: dict) -> None:
    router = AlertRouter(RoutingDecisionStore(), settings)

    decision = router.evaluate(Alert.new(database_payload))

    assert decision.action == RoutingAction.REDIRECT
    assert decision.destination == "chan-db"
    assert decision.reason == "Matched database routing rule"


def test_db_channel_falls_back_to_default(database_payload: dict) -> None:
    router = AlertRouter(RoutingDecisionStore(), Settings(default_channel_id="chan-default"))

    decision = router.evaluate(Alert.new(database_payload))

    assert decision.action == RoutingAction.REDIRECT
    assert decision.destination == "chan-default"


def test_default_routing(settings: Settings, disk_payload: dict) -> None:
    router = AlertRouter(RoutingDecisionStore(), settings)

    decision = router.evaluate(Alert.new(disk_payload))

    assert decision.action == RoutingAction.PASS
    assert decision.destination == "chan-default"
    assert decision.reason == DEFAULT_REASON


def test_evaluation_is_deterministic(settings: Settings, database_payload: dict) -> None:
    router = AlertRouter(RoutingDecisionStore(), settings)
    alert = Alert.new(database_payload)

    first = router.evaluate(alert)
    second = router.evaluate(alert)

    assert (first.action, first.destination, first.reason) == (second.action, second.destination, second.reason)


def test_first_matching_rule_wins(settings: Settings) -> None:
    rules = [
        RoutingRule(
            name="noise",
            action=RoutingAction.DROP,
            destination="ignored",
            reason="Known noisy check",
            predicate=lambda alert: alert.field("source") == "synthetic",
        ),
        RoutingRule(
            name="everything",
            action=RoutingAction.REDIRECT,
            destination="chan-other",
            reason="Catch all",
            predicate=lambda alert: True,
        ),
    ]
    router = AlertRouter(RoutingDecisionStore(), settings, rules)

    dropped = router.evaluate(Alert.new({"source": "synthetic"}))
    redirected = router.evaluate(Alert.new({"source": "prometheus"}))

    assert dropped.action == RoutingAction.DROP
    assert dropped.destination is None
    assert redirected.destination == "chan-other"


@pytest.mark.asyncio
async def test_route_records_decisions(redis, settings: Settings, disk_payload: dict, database_payload: dict) -> None:
    store = RoutingDecisionStore(redis)
    router = AlertRouter(store, settings)

    first = await router.route(Alert.new(disk_payload))
    second = await router.route(Alert.new(database_payload))

    assert first.decision_id == 1
    assert second.decision_id == 2
    recent = await router.get_recent_decisions()
    assert [decision.decision_id for decision in recent] == [2, 1]


@pytest.mark.asyncio
async def test_routing_stats(redis, disk_payload: dict, database_payload: dict) -> None:
    router = AlertRouter(RoutingDecisionStore(redis), Settings(db_channel_id="chan-db"))
    await router.route(Alert.new(disk_payload))
    await router.route(Alert.new(disk_payload))
    await router.route(Alert.new(database_payload))

    stats = await router.get_stats()

    assert stats.total_decisions == 3
    assert stats.by_action == {"PASS": 2, "REDIRECT": 1}
    assert stats.by_destination == {"none": 2, "chan-db": 1}

    limited = await router.get_stats(limit=1)
    assert limited.total_decisions == 1
    assert limited.by_action == {"REDIRECT": 1}


@pytest.mark.asyncio
async def test_routing_stats_empty(redis, settings: Settings) -> None:
    router = AlertRouter(RoutingDecisionStore(redis), settings)

    stats = await router.get_stats()

    assert stats.total_decisions == 0
    assert stats.by_action == {}
