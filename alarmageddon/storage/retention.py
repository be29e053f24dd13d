"""Periodic retention sweep and silence expiry."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

from alarmageddon.core.config import Settings, get_settings
from alarmageddon.core.logging import get_logger
from alarmageddon.observability.metrics import RETENTION_SWEEPS
from alarmageddon.storage.alert_store import AlertStore
from alarmageddon.storage.routing_store import RoutingDecisionStore
from alarmageddon.storage.silence_store import SilenceStore

logger = get_logger(__name__)


@dataclass
class SweepResult:
    """Counts of records touched by one retention sweep."""

    alerts_deleted: int = 0
    routing_deleted: int = 0
    silences_expired: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.alerts_deleted or self.routing_deleted or self.silences_expired)


class RetentionSweeper:
    """Deletes aged records and deactivates expired silences.

    Two independent loops run as background tasks: the full sweep (once at
    startup, then every ``retention_interval_seconds``) and the silence
    expiry check (every ``silence_check_interval_seconds``).
    """

    def __init__(
        self,
        alerts: AlertStore,
        silences: SilenceStore,
        routing: RoutingDecisionStore,
        settings: Settings | None = None,
    ):
        self._alerts = alerts
        self._silences = silences
        self._routing = routing
        self._settings = settings or get_settings()
        self._tasks: list[asyncio.Task[None]] = []

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """Run one retention sweep.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            Counts of deleted and deactivated records
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self._settings.retention_days)
        cutoff_ms = int(cutoff.timestamp() * 1000)

        result = SweepResult(
            alerts_deleted=await self._alerts.delete_older_than(cutoff_ms),
            routing_deleted=await self._routing.delete_older_than(cutoff_ms),
            silences_expired=await self._silences.deactivate_expired(now),
        )
        if result.changed:
            logger.info(
                "Database cleanup completed",
                alerts_deleted=result.alerts_deleted,
                routing_deleted=result.routing_deleted,
                silences_expired=result.silences_expired,
                retention_days=self._settings.retention_days,
            )
        return result

    async def expire_silences(self, now: datetime | None = None) -> int:
        """Deactivate silences past their expiration."""
        expired = await self._silences.deactivate_expired(now)
        if expired:
            logger.info("Expired silences cleaned up", count=expired)
        return expired

    def start(self) -> None:
        """Start the background loops."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(
                self._run_periodically("retention", self.sweep, self._settings.retention_interval_seconds)
            ),
            asyncio.create_task(
                self._run_periodically(
                    "silence_expiry",
                    self.expire_silences,
                    self._settings.silence_check_interval_seconds,
                )
            ),
        ]
        logger.info("Retention sweeper started")

    async def stop(self) -> None:
        """Cancel the background loops and wait for them to finish."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Retention sweeper stopped")

    async def _run_periodically(
        self,
        name: str,
        job: Callable[[], Awaitable[Any]],
        interval: int,
    ) -> None:
        """Run a job immediately and then every ``interval`` seconds."""
        while True:
            try:
                await job()
                RETENTION_SWEEPS.labels(job=name, status="ok").inc()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                RETENTION_SWEEPS.labels(job=name, status="error").inc()
                logger.error("Background cleanup failed", job=name, error=str(e), exc_info=True)
            await asyncio.sleep(interval)
