"""Discord message formatting for alerts, silences and routing history."""

from datetime import datetime, timezone
from typing import Any

from alarmageddon.models.alert import Alert
from alarmageddon.models.routing import RoutingDecision, RoutingStats
from alarmageddon.models.silence import Silence

SEVERITY_COLORS = {
    "critical": 0xFF0000,
    "high": 0xFF9900,
    "medium": 0xFFFF00,
    "low": 0x00FF00,
    "info": 0x0099FF,
}
ACKNOWLEDGED_COLOR = 0x00FF00
LIST_COLOR = 0x0099FF
SILENCE_COLOR = 0xFFA500

# Discord message flag for replies only the invoking user can see
EPHEMERAL = 1 << 6

ACK_BUTTON_PREFIX = "ack_"
FOOTER_TEXT = "Alarmageddon"

# Discord limits
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096


def format_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def ack_button(alert_id: str) -> dict[str, Any]:
    """Build the action row holding the Acknowledge button."""
    return {
        "type": 1,
        "components": [
            {
                "type": 2,
                "style": 3,
                "label": "Acknowledge",
                "custom_id": f"{ACK_BUTTON_PREFIX}{alert_id}",
                "emoji": {"name": "✅"},
            }
        ],
    }


def build_alert_embed(alert: Alert) -> dict[str, Any]:
    """Build the embed describing an alert."""
    severity = alert.field("severity", "info")
    source = alert.field("source") or alert.field("service") or "google-alerts"

    embed: dict[str, Any] = {
        "title": alert.field("title", "Alert")[:TITLE_LIMIT],
        "description": alert.field("description", "No description provided")[:DESCRIPTION_LIMIT],
        "color": SEVERITY_COLORS.get(severity.lower(), SEVERITY_COLORS["info"]),
        "fields": [
            {"name": "Severity", "value": severity.upper(), "inline": True},
            {"name": "Source", "value": source, "inline": True},
            {"name": "Alert ID", "value": alert.id, "inline": True},
        ],
        "timestamp": alert.received_at.isoformat(),
        "footer": {"text": FOOTER_TEXT},
    }

    url = alert.field("url")
    if url:
        embed["url"] = url

    hostname = alert.field("hostname")
    if hostname:
        embed["fields"].append({"name": "Host", "value": hostname, "inline": True})

    service = alert.field("service")
    if service:
        embed["fields"].append({"name": "Service", "value": service, "inline": True})

    return embed


def build_alert_message(alert: Alert) -> dict[str, Any]:
    """Build the full chat message for an alert.

    Acknowledged alerts are recolored, show who acknowledged them and lose
    the Acknowledge button.
    """
    embed = build_alert_embed(alert)

    if alert.acknowledged:
        acknowledged_at = format_time(alert.acknowledged_at) if alert.acknowledged_at else "unknown time"
        embed["fields"].append({
            "name": "✅ Acknowledged",
            "value": f"By {alert.acknowledged_by} at {acknowledged_at}",
            "inline": False,
        })
        embed["color"] = ACKNOWLEDGED_COLOR
        components: list[dict[str, Any]] = []
    else:
        components = [ack_button(alert.id)]

    return {"embeds": [embed], "components": components}


def ephemeral(content: str) -> dict[str, Any]:
    """Build a plain text reply visible only to the invoking user."""
    return {"content": content, "flags": EPHEMERAL}


def format_alert_list(alerts: list[Alert]) -> dict[str, Any]:
    """Format recent alerts as an ephemeral reply."""
    if not alerts:
        return ephemeral("No recent alerts found.")

    lines = []
    for index, alert in enumerate(alerts, start=1):
        severity = alert.field("severity", "info").upper()
        title = alert.field("title", "Alert")[:50]
        link = ""
        if alert.delivered:
            link = f" ([View](https://discord.com/channels/@me/{alert.channel_id}/{alert.message_id}))"
        status = " ✅" if alert.acknowledged else (" 🔕" if alert.silenced else "")
        lines.append(
            f"**{index}.** ID: `{alert.id}` | `{severity}` {title} - {format_time(alert.received_at)}{link}{status}"
        )

    return {
        "embeds": [{
            "title": "Recent Alerts",
            "description": "\n".join(lines)[:DESCRIPTION_LIMIT],
            "color": LIST_COLOR,
            "footer": {"text": f"Showing {len(alerts)} most recent alerts"},
        }],
        "flags": EPHEMERAL,
    }


def format_expires_in(silence: Silence, now: datetime | None = None) -> str:
    """Render the remaining lifetime of a silence as ``Nm``, ``Nh`` or ``Nd``."""
    now = now or datetime.now(timezone.utc)
    remaining = (silence.expires_at - now).total_seconds()
    minutes = round(remaining / 60)
    hours = round(remaining / 3600)
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    return f"{round(hours / 24)}d"


def format_silence_list(silences: list[Silence], now: datetime | None = None) -> dict[str, Any]:
    """Format active silences as an ephemeral reply."""
    if not silences:
        return ephemeral("No active silences.")

    lines = [
        f"**{index}.** ID: `{silence.id}` | Pattern: `{silence.pattern}` | "
        f"Expires in {format_expires_in(silence, now)} | By {silence.created_by}"
        for index, silence in enumerate(silences, start=1)
    ]
    return {
        "embeds": [{
            "title": "Active Silences",
            "description": "\n".join(lines)[:DESCRIPTION_LIMIT],
            "color": SILENCE_COLOR,
            "footer": {"text": f"{len(silences)} active silence(s)"},
        }],
        "flags": EPHEMERAL,
    }


def format_routing_stats(stats: RoutingStats) -> dict[str, Any]:
    """Format routing statistics as an ephemeral reply."""
    if not stats.total_decisions:
        return ephemeral("No routing decisions recorded.")

    def _counts(values: dict[str, int]) -> str:
        return "\n".join(f"`{key}`: {count}" for key, count in sorted(values.items())) or "-"

    return {
        "embeds": [{
            "title": "Routing Statistics",
            "color": LIST_COLOR,
            "fields": [
                {"name": "By Action", "value": _counts(stats.by_action), "inline": True},
                {"name": "By Destination", "value": _counts(stats.by_destination), "inline": True},
            ],
            "footer": {"text": f"Based on the last {stats.total_decisions} decisions"},
        }],
        "flags": EPHEMERAL,
    }


def format_routing_decisions(decisions: list[RoutingDecision]) -> dict[str, Any]:
    """Format recent routing decisions as an ephemeral reply."""
    if not decisions:
        return ephemeral("No routing decisions recorded.")

    lines = [
        f"`{decision.action.value}` → {decision.destination or 'none'} | `{decision.alert_id}` | {decision.reason}"
        for decision in decisions
    ]
    return {
        "embeds": [{
            "title": "Recent Routing Decisions",
            "description": "\n".join(lines)[:DESCRIPTION_LIMIT],
            "color": LIST_COLOR,
        }],
        "flags": EPHEMERAL,
    }
