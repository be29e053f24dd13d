"""Routing decision domain models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class RoutingAction(str, Enum):
    """Routing action enumeration."""

    PASS = "PASS"
    DROP = "DROP"
    REDIRECT = "REDIRECT"
    # Reserved, no rule produces it yet
    ESCALATE = "ESCALATE"

    @property
    def delivers(self) -> bool:
        """Whether the action results in a chat message."""
        return self in (RoutingAction.PASS, RoutingAction.REDIRECT)


class RoutingDecision(BaseModel):
    """Routing decision computed for one alert."""

    decision_id: int | None = Field(default=None, description="Sequence number assigned by the store")
    alert_id: str = Field(..., description="Alert the decision was computed for")
    action: RoutingAction = Field(..., description="Action taken")
    destination: str | None = Field(default=None, description="Destination channel ID")
    reason: str = Field(default="", description="Why the action was chosen")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RoutingStats(BaseModel):
    """Aggregated counts over recent routing decisions."""

    total_decisions: int = 0
    by_action: dict[str, int] = Field(default_factory=dict)
    by_destination: dict[str, int] = Field(default_factory=dict)
