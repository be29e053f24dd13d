"""Alert ingestion pipeline."""

import time
from typing import Any

from alarmageddon.core.logging import get_logger
from alarmageddon.engine.router import AlertRouter
from alarmageddon.engine.silences import SilenceRegistry
from alarmageddon.models.alert import Alert
from alarmageddon.notification.channels.base import ChatClient
from alarmageddon.notification.formatter import build_alert_message
from alarmageddon.observability.metrics import ALERTS_RECEIVED, ALERTS_SILENCED
from alarmageddon.storage.alert_store import AlertStore

logger = get_logger(__name__)


class AlertOrchestrator:
    """Runs a received payload through silencing, routing and delivery."""

    def __init__(
        self,
        store: AlertStore,
        silences: SilenceRegistry,
        router: AlertRouter,
        chat: ChatClient,
    ):
        """Initialize orchestrator.

        Args:
            store: Alert storage
            silences: Silence registry
            router: Alert router
            chat: Chat client used for delivery
        """
        self._store = store
        self._silences = silences
        self._router = router
        self._chat = chat

    async def ingest(self, payload: dict[str, Any]) -> Alert:
        """Process a received webhook payload through the full pipeline.

        Pipeline steps:
        1. Build the alert
        2. Silence check (silenced alerts are neither routed nor delivered)
        3. Routing (DROP skips delivery)
        4. Persist the alert
        5. Deliver and persist the message identifiers

        Delivery failures are logged and leave the alert without delivery
        metadata; only storage errors propagate.

        Args:
            payload: Raw webhook payload

        Returns:
            The persisted alert
        """
        start_time = time.time()

        # Step 1: Build the alert
        alert = Alert.new(payload)
        ALERTS_RECEIVED.labels(source=alert.field("source", "unknown")).inc()
        logger.info(
            "Processing alert",
            alert_id=alert.id,
            title=alert.field("title", "Alert"),
            severity=alert.field("severity", "info"),
        )

        # Step 2: Silence check
        silence = await self._silences.is_alert_silenced(alert)
        if silence:
            alert.silenced = True
            alert.silenced_by = silence.id
            ALERTS_SILENCED.inc()
            logger.info("Alert silenced", alert_id=alert.id, silence_id=silence.id)
        else:
            # Step 3: Routing
            alert.routing_decision = await self._router.route(alert)

        # Step 4: Persist
        await self._store.save(alert)

        # Step 5: Deliver
        decision = alert.routing_decision
        if decision and decision.action.delivers:
            if decision.destination:
                await self._deliver(alert, decision.destination)
            else:
                logger.warning("No destination channel for alert", alert_id=alert.id)
        elif decision:
            logger.info("Alert dropped by routing", alert_id=alert.id, reason=decision.reason)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Alert processing complete",
            alert_id=alert.id,
            silenced=alert.silenced,
            delivered=alert.delivered,
            elapsed_ms=elapsed_ms,
        )
        return alert

    async def _deliver(self, alert: Alert, channel_id: str) -> None:
        """Post an alert and record where it landed.

        Args:
            alert: Persisted alert
            channel_id: Destination channel
        """
        message = await self._chat.post_message(channel_id, build_alert_message(alert))
        if message is None:
            logger.warning("Alert delivery failed", alert_id=alert.id, channel_id=channel_id)
            return

        alert.message_id = message.message_id
        alert.channel_id = message.channel_id
        await self._store.update(
            alert.id,
            {"message_id": message.message_id, "channel_id": message.channel_id},
        )
