"""Webhook API schemas."""

from pydantic import BaseModel, Field

from alarmageddon.models.alert import Alert


class WebhookAccepted(BaseModel):
    """Schema for an ingested webhook."""

    alert_id: str = Field(..., description="ID of the stored alert")
    silenced: bool = Field(..., description="Whether a silence suppressed the alert")
    delivered: bool = Field(..., description="Whether a chat message was posted")


class RecentAlerts(BaseModel):
    """Schema for the recent alerts listing."""

    count: int = Field(..., ge=0)
    alerts: list[Alert] = Field(default_factory=list)
