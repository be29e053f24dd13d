"""Tests for Discord message formatting."""

from datetime import datetime, timedelta, timezone

from alarmageddon.models.alert import Alert
from alarmageddon.models.routing import RoutingAction, RoutingDecision, RoutingStats
from alarmageddon.models.silence import Silence
from alarmageddon.notification.formatter import (
    ACKNOWLEDGED_COLOR,
    EPHEMERAL,
    SEVERITY_COLORS,
    build_alert_message,
    format_alert_list,
    format_expires_in,
    format_routing_decisions,
    format_routing_stats,
    format_silence_list,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_alert(**payload) -> Alert:
    return Alert(
        id="alert_1",
        timestamp=int(NOW.timestamp() * 1000),
        received_at=NOW,
        payload=payload,
    )


def test_alert_message_layout() -> None:
    alert = make_alert(
        title="Disk usage high",
        message="Root volume at 91%",
        severity="High",
        host="web-01",
        service="storage",
        url="https://grafana.example.com/d/disk",
    )

    body = build_alert_message(alert)

    embed = body["embeds"][0]
    assert embed["title"] == "Disk usage high"
    assert embed["description"] == "Root volume at 91%"
    assert embed["color"] == SEVERITY_COLORS["high"]
    assert embed["url"] == "https://grafana.example.com/d/disk"
    assert embed["timestamp"] == NOW.isoformat()
    fields = {field["name"]: field["value"] for field in embed["fields"]}
    assert fields == {
        "Severity": "HIGH",
        "Source": "storage",
        "Alert ID": "alert_1",
        "Host": "web-01",
        "Service": "storage",
    }
    button = body["components"][0]["components"][0]
    assert button["custom_id"] == "ack_alert_1"
    assert button["label"] == "Acknowledge"


def test_alert_message_defaults() -> None:
    body = build_alert_message(make_alert())

    embed = body["embeds"][0]
    assert embed["title"] == "Alert"
    assert embed["description"] == "No description provided"
    assert embed["color"] == SEVERITY_COLORS["info"]
    assert "url" not in embed


def test_unknown_severity_uses_info_color() -> None:
    body = build_alert_message(make_alert(severity="catastrophic"))

    assert body["embeds"][0]["color"] == SEVERITY_COLORS["info"]


def test_acknowledged_alert_message() -> None:
    alert = make_alert(title="Disk usage high", severity="critical").model_copy(update={
        "acknowledged": True,
        "acknowledged_by": "alice",
        "acknowledged_at": NOW,
    })

    body = build_alert_message(alert)

    embed = body["embeds"][0]
    assert embed["color"] == ACKNOWLEDGED_COLOR
    assert embed["fields"][-1] == {
        "name": "✅ Acknowledged",
        "value": "By alice at 2026-03-01 12:00:00 UTC",
        "inline": False,
    }
    assert body["components"] == []


def test_alert_list() -> None:
    delivered = make_alert(title="Disk usage high", severity="critical").model_copy(update={
        "message_id": "m1",
        "channel_id": "c1",
    })

    reply = format_alert_list([delivered])

    assert reply["flags"] == EPHEMERAL
    description = reply["embeds"][0]["description"]
    assert "`alert_1`" in description
    assert "`CRITICAL`" in description
    assert "/c1/m1" in description


def test_empty_lists_are_ephemeral_text() -> None:
    assert format_alert_list([]) == {"content": "No recent alerts found.", "flags": EPHEMERAL}
    assert format_silence_list([])["content"] == "No active silences."
    assert format_routing_decisions([])["flags"] == EPHEMERAL
    assert format_routing_stats(RoutingStats())["flags"] == EPHEMERAL


def test_expires_in() -> None:
    silence = Silence(id="silence_1", created_at=NOW, expires_at=NOW + timedelta(minutes=10))

    assert format_expires_in(silence, NOW) == "10m"
    assert format_expires_in(silence.model_copy(update={"expires_at": NOW + timedelta(hours=3)}), NOW) == "3h"
    assert format_expires_in(silence.model_copy(update={"expires_at": NOW + timedelta(days=2)}), NOW) == "2d"


def test_silence_list() -> None:
    silence = Silence(
        id="silence_1",
        pattern="disk",
        created_by="alice",
        created_at=NOW,
        expires_at=NOW + timedelta(minutes=10),
    )

    description = format_silence_list([silence], NOW)["embeds"][0]["description"]

    assert "`silence_1`" in description
    assert "`disk`" in description
    assert "Expires in 10m" in description
    assert "By alice" in description


def test_routing_views() -> None:
    stats = RoutingStats(total_decisions=3, by_action={"PASS": 2, "REDIRECT": 1}, by_destination={"c1": 3})
    decision = RoutingDecision(alert_id="alert_1", action=RoutingAction.DROP, reason="Maintenance")

    stats_fields = format_routing_stats(stats)["embeds"][0]["fields"]
    recent = format_routing_decisions([decision])["embeds"][0]["description"]

    assert stats_fields[0]["value"] == "`PASS`: 2\n`REDIRECT`: 1"
    assert stats_fields[1]["value"] == "`c1`: 3"
    assert recent == "`DROP` → none | `alert_1` | Maintenance"
