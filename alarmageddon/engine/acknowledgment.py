"""Alert acknowledgment by ID or by pattern."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from redis.exceptions import RedisError

from alarmageddon.core.config import Settings, get_settings
from alarmageddon.core.logging import get_logger
from alarmageddon.engine.matcher import compile_pattern, matches
from alarmageddon.models.alert import Alert
from alarmageddon.notification.channels.base import ChatClient
from alarmageddon.notification.formatter import build_alert_message
from alarmageddon.observability.metrics import ALERTS_ACKNOWLEDGED
from alarmageddon.storage.alert_store import AlertStore

logger = get_logger(__name__)


class AckOutcome(str, Enum):
    """Result of a single acknowledgment attempt."""

    ACKNOWLEDGED = "acknowledged"
    NOT_FOUND = "not_found"
    ALREADY_ACKNOWLEDGED = "already_acknowledged"


@dataclass
class AckResult:
    """Outcome of acknowledging one alert."""

    outcome: AckOutcome
    alert: Alert | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == AckOutcome.ACKNOWLEDGED


@dataclass
class BulkAckResult:
    """Outcome of acknowledging alerts by pattern."""

    acknowledged: list[Alert] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class AcknowledgmentEngine:
    """Marks alerts acknowledged and re-renders their chat messages."""

    def __init__(self, store: AlertStore, chat: ChatClient, settings: Settings | None = None):
        """Initialize engine.

        Args:
            store: Alert storage
            chat: Chat client used to update messages
            settings: Application settings
        """
        self._store = store
        self._chat = chat
        self._settings = settings or get_settings()

    async def acknowledge_by_id(self, alert_id: str, actor: str, mode: str = "id") -> AckResult:
        """Acknowledge a single alert.

        Args:
            alert_id: Alert ID
            actor: Name of the acknowledging user
            mode: Metric label describing how the acknowledgment was triggered

        Returns:
            Acknowledgment result
        """
        alert = await self._store.get(alert_id)
        if alert is None:
            logger.info("Alert not found for acknowledgment", alert_id=alert_id)
            return AckResult(AckOutcome.NOT_FOUND)
        if alert.acknowledged:
            logger.info("Alert already acknowledged", alert_id=alert_id)
            return AckResult(AckOutcome.ALREADY_ACKNOWLEDGED, alert)

        return await self._acknowledge(alert, actor, mode)

    async def acknowledge_by_pattern(
        self,
        pattern: str | None,
        actor: str,
        limit: int | None = None,
    ) -> BulkAckResult:
        """Acknowledge every recent unacknowledged alert matching a pattern.

        Each alert is acknowledged independently; storage failures for one
        alert are logged and collected without stopping the others.

        Args:
            pattern: Regular expression; empty means match everything
            actor: Name of the acknowledging user
            limit: Number of recent alerts to scan (defaults to settings.recent_window)

        Returns:
            Newly acknowledged alerts and IDs of alerts that failed

        Raises:
            InvalidPatternError: If the pattern is not a valid regular expression
        """
        compile_pattern(pattern)
        candidates = await self._store.list_recent(
            limit or self._settings.recent_window,
            include_acknowledged=False,
        )

        result = BulkAckResult()
        for alert in candidates:
            if not matches(pattern, alert):
                continue
            try:
                ack = await self._acknowledge(alert, actor, "pattern")
            except RedisError as e:
                logger.error("Failed to acknowledge alert", alert_id=alert.id, error=str(e))
                result.failed.append(alert.id)
                continue
            if ack.ok and ack.alert:
                result.acknowledged.append(ack.alert)

        logger.info(
            "Pattern acknowledgment complete",
            pattern=pattern,
            scanned=len(candidates),
            acknowledged=len(result.acknowledged),
            failed=len(result.failed),
        )
        return result

    async def _acknowledge(self, alert: Alert, actor: str, mode: str) -> AckResult:
        acknowledged_at = datetime.now(timezone.utc)
        updated = await self._store.update(
            alert.id,
            {
                "acknowledged": True,
                "acknowledged_by": actor,
                "acknowledged_at": acknowledged_at,
            },
            unless_acknowledged=True,
        )
        if not updated:
            # Lost a race with another acknowledgment or with the retention sweep
            current = await self._store.get(alert.id)
            if current is None:
                return AckResult(AckOutcome.NOT_FOUND)
            return AckResult(AckOutcome.ALREADY_ACKNOWLEDGED, current)

        alert = alert.model_copy(update={
            "acknowledged": True,
            "acknowledged_by": actor,
            "acknowledged_at": acknowledged_at,
        })
        ALERTS_ACKNOWLEDGED.labels(mode=mode).inc()
        logger.info("Alert acknowledged", alert_id=alert.id, acknowledged_by=actor)

        await self._rerender(alert)
        return AckResult(AckOutcome.ACKNOWLEDGED, alert)

    async def _rerender(self, alert: Alert) -> None:
        if not alert.delivered:
            logger.warning("Cannot update message - missing message or channel ID", alert_id=alert.id)
            return
        await self._chat.edit_message(alert.channel_id, alert.message_id, build_alert_message(alert))
