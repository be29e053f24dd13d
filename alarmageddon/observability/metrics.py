"""Prometheus metrics definitions."""

from prometheus_client import Counter

# Alert metrics
ALERTS_RECEIVED = Counter(
    "alarmageddon_alerts_received_total",
    "Total number of alerts ingested",
    ["source"],
)

ALERTS_SILENCED = Counter(
    "alarmageddon_alerts_silenced_total",
    "Total number of alerts suppressed by a silence",
)

ALERTS_ACKNOWLEDGED = Counter(
    "alarmageddon_alerts_acknowledged_total",
    "Total number of alerts acknowledged",
    ["mode"],
)

# Routing metrics
ROUTING_DECISIONS = Counter(
    "alarmageddon_routing_decisions_total",
    "Total number of routing decisions",
    ["action"],
)

# Chat metrics
CHAT_REQUESTS = Counter(
    "alarmageddon_chat_requests_total",
    "Total chat platform requests",
    ["operation", "status"],
)

# Webhook metrics
WEBHOOKS_REJECTED = Counter(
    "alarmageddon_webhooks_rejected_total",
    "Total webhook requests rejected for failed authentication",
)

# Retention metrics
RETENTION_SWEEPS = Counter(
    "alarmageddon_retention_sweeps_total",
    "Total background cleanup runs",
    ["job", "status"],
)
