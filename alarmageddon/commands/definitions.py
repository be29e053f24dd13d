"""Slash command definitions installed on the Discord application."""

from typing import Any

SUB_COMMAND = 1
STRING = 3

# Guild install + user install, usable in guilds, bot DMs and private channels
_AVAILABILITY: dict[str, Any] = {
    "type": 1,
    "integration_types": [0, 1],
    "contexts": [0, 1, 2],
}


def _string_option(name: str, description: str, required: bool = False) -> dict[str, Any]:
    return {"name": name, "description": description, "type": STRING, "required": required}


PING_COMMAND = {
    "name": "ping",
    "description": "Test if the bot is responsive",
    **_AVAILABILITY,
}

WEBHOOK_COMMAND = {
    "name": "webhook",
    "description": "Webhook testing utilities",
    **_AVAILABILITY,
    "options": [
        {"name": "test", "description": "Send a test alert through the pipeline", "type": SUB_COMMAND},
    ],
}

ALERT_COMMAND = {
    "name": "alert",
    "description": "Alert management commands",
    **_AVAILABILITY,
    "options": [
        {"name": "list", "description": "Show recent alerts", "type": SUB_COMMAND},
        {
            "name": "ack",
            "description": "Acknowledge one alert by ID, or every alert matching a pattern (default: all)",
            "type": SUB_COMMAND,
            "options": [
                _string_option("pattern", 'Regex pattern to match alerts (e.g. "critical", "disk.*") - default: .*'),
                _string_option("id", "Acknowledge a single alert by ID"),
            ],
        },
    ],
}

SILENCE_COMMAND = {
    "name": "silence",
    "description": "Silence management commands",
    **_AVAILABILITY,
    "options": [
        {
            "name": "create",
            "description": "Suppress alerts matching a pattern for a while",
            "type": SUB_COMMAND,
            "options": [
                _string_option("duration", "How long to silence, e.g. 30s, 5m, 2h, 1d", required=True),
                _string_option("pattern", "Regex pattern to match alerts - default: .* (all)"),
            ],
        },
        {"name": "list", "description": "Show active silences", "type": SUB_COMMAND},
        {
            "name": "delete",
            "description": "Remove a silence",
            "type": SUB_COMMAND,
            "options": [_string_option("id", "Silence ID", required=True)],
        },
    ],
}

ROUTING_COMMAND = {
    "name": "routing",
    "description": "Alert routing insights",
    **_AVAILABILITY,
    "options": [
        {"name": "stats", "description": "Show routing statistics", "type": SUB_COMMAND},
        {"name": "recent", "description": "Show recent routing decisions", "type": SUB_COMMAND},
    ],
}

ALL_COMMANDS = [PING_COMMAND, WEBHOOK_COMMAND, ALERT_COMMAND, SILENCE_COMMAND, ROUTING_COMMAND]
