"""Webhook ingestion API routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from alarmageddon.api.deps import ServicesDep
from alarmageddon.api.security import require_webhook_token
from alarmageddon.core.logging import get_logger
from alarmageddon.schemas.common import APIResponse
from alarmageddon.schemas.webhook import RecentAlerts, WebhookAccepted

logger = get_logger(__name__)

router = APIRouter(
    prefix="/webhooks",
    tags=["webhooks"],
    dependencies=[Depends(require_webhook_token)],
)


@router.get("/recent", response_model=APIResponse[RecentAlerts])
async def recent_alerts(
    services: ServicesDep,
    limit: int = Query(default=10, ge=1, le=100, description="Maximum number of alerts"),
) -> APIResponse[RecentAlerts]:
    """List the most recent alerts, acknowledged or not."""
    alerts = await services.alerts.list_recent(limit, include_acknowledged=True)
    return APIResponse(data=RecentAlerts(count=len(alerts), alerts=alerts))


@router.post("/{source}", response_model=APIResponse[WebhookAccepted])
async def receive_webhook(
    source: str,
    services: ServicesDep,
    payload: dict[str, Any] = Body(..., description="Alert payload"),
) -> APIResponse[WebhookAccepted]:
    """Receive an alert from a monitoring source."""
    logger.info("Webhook received", source=source, fields=sorted(payload))

    alert = await services.orchestrator.ingest({"source": source, **payload})

    return APIResponse(
        message="Webhook received",
        data=WebhookAccepted(
            alert_id=alert.id,
            silenced=alert.silenced,
            delivered=alert.delivered,
        ),
    )
