"""Alert domain models."""

import json
import secrets
import time
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from alarmageddon.models.routing import RoutingDecision

# Candidate payload keys per logical attribute, in precedence order
FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    "title": ("title", "subject"),
    "description": ("description", "message", "body"),
    "severity": ("severity", "level"),
    "service": ("service",),
    "hostname": ("hostname", "host"),
    "source": ("source",),
    "url": ("url",),
}

ALERT_MUTABLE_FIELDS = frozenset({
    "acknowledged",
    "acknowledged_by",
    "acknowledged_at",
    "message_id",
    "channel_id",
})

_ACK_FIELDS = frozenset({"acknowledged", "acknowledged_by", "acknowledged_at"})
_BOOLEAN_FIELDS = frozenset({"silenced", "acknowledged"})


def resolve_field(payload: dict[str, Any], name: str, default: str = "") -> str:
    """Return the first non-empty candidate value for a logical attribute.

    Args:
        payload: Raw webhook payload
        name: Logical attribute name (a key of FIELD_CANDIDATES)
        default: Value returned when no candidate is set

    Returns:
        The resolved value as a string
    """
    for key in FIELD_CANDIDATES.get(name, (name,)):
        value = payload.get(key)
        if value is not None and str(value) != "":
            return str(value)
    return default


def generate_alert_id(timestamp_ms: int) -> str:
    """Generate a time-ordered alert ID with a random suffix."""
    return f"alert_{timestamp_ms}_{secrets.token_hex(3)}"


def _encode_value(name: str, value: Any) -> str:
    if value is None:
        return ""
    if name in _BOOLEAN_FIELDS:
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if name in ("payload", "routing_decision"):
        return json.dumps(value, default=str)
    return str(value)


def encode_alert_fields(updates: dict[str, Any]) -> dict[str, str]:
    """Translate mutable alert fields into their stored representation.

    Raises:
        ValueError: If a field is unknown or not mutable
    """
    unknown = set(updates) - ALERT_MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown or immutable alert fields: {', '.join(sorted(unknown))}")
    ack_fields = _ACK_FIELDS & set(updates)
    if ack_fields and ack_fields != _ACK_FIELDS:
        raise ValueError("acknowledged, acknowledged_by and acknowledged_at must be updated together")
    return {name: _encode_value(name, value) for name, value in updates.items()}


class Alert(BaseModel):
    """Durable record of one ingested webhook payload."""

    id: str = Field(..., description="Alert unique identifier")
    timestamp: int = Field(..., description="Ingestion time in epoch milliseconds")
    received_at: datetime = Field(..., description="Ingestion time")
    payload: dict[str, Any] = Field(default_factory=dict, description="Raw webhook payload")
    silenced: bool = Field(default=False)
    silenced_by: str | None = Field(default=None, description="ID of the matching silence")
    acknowledged: bool = Field(default=False)
    acknowledged_by: str | None = Field(default=None)
    acknowledged_at: datetime | None = Field(default=None)
    message_id: str | None = Field(default=None, description="Posted chat message ID")
    channel_id: str | None = Field(default=None, description="Channel the message was posted to")
    routing_decision: RoutingDecision | None = Field(default=None)

    @classmethod
    def new(cls, payload: dict[str, Any]) -> "Alert":
        """Create an alert for a freshly received payload."""
        timestamp_ms = time.time_ns() // 1_000_000
        return cls(
            id=generate_alert_id(timestamp_ms),
            timestamp=timestamp_ms,
            received_at=datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc),
            payload=dict(payload),
        )

    def field(self, name: str, default: str = "") -> str:
        """Resolve a logical payload attribute, see FIELD_CANDIDATES."""
        return resolve_field(self.payload, name, default)

    @property
    def delivered(self) -> bool:
        return self.message_id is not None and self.channel_id is not None

    def to_record(self) -> dict[str, str]:
        """Serialize to a flat string mapping for storage."""
        return {name: _encode_value(name, getattr(self, name)) for name in type(self).model_fields}

    @classmethod
    def from_record(cls, record: dict[str, str]) -> "Alert":
        """Deserialize from the flat string mapping produced by to_record."""
        data: dict[str, Any] = {
            key: (value if value != "" else None)
            for key, value in record.items()
            if key in cls.model_fields
        }
        data["payload"] = json.loads(data.get("payload") or "{}")
        for name in _BOOLEAN_FIELDS:
            data[name] = data.get(name) == "1"
        if data.get("routing_decision"):
            data["routing_decision"] = json.loads(data["routing_decision"])
        return cls.model_validate(data)
