"""Alert record storage operations."""

from typing import Any

from redis.asyncio import Redis
from redis.exceptions import WatchError

from alarmageddon.core.logging import get_logger
from alarmageddon.models.alert import Alert, encode_alert_fields
from alarmageddon.storage.redis_client import RedisKeys, get_redis

logger = get_logger(__name__)


class AlertStore:
    """Alert storage using a Redis hash per alert plus time-ordered indexes.

    ``ALERT_TIMELINE`` holds every alert scored by ingestion time;
    ``ALERT_UNACKED`` holds only alerts that are not yet acknowledged.
    """

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def save(self, alert: Alert) -> Alert:
        """Persist a new alert.

        Args:
            alert: Alert to store

        Returns:
            The stored alert
        """
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(RedisKeys.alert_detail(alert.id), mapping=alert.to_record())
            pipe.zadd(RedisKeys.ALERT_TIMELINE, {alert.id: alert.timestamp})
            if not alert.acknowledged:
                pipe.zadd(RedisKeys.ALERT_UNACKED, {alert.id: alert.timestamp})
            await pipe.execute()

        logger.debug("Alert saved", alert_id=alert.id)
        return alert

    async def update(
        self,
        alert_id: str,
        updates: dict[str, Any],
        *,
        unless_acknowledged: bool = False,
    ) -> bool:
        """Merge fields into a stored alert.

        The read-check-write runs under WATCH so the update is atomic for
        the row.

        Args:
            alert_id: Alert ID to update
            updates: Mutable alert fields and their new values
            unless_acknowledged: Refuse the update if the alert is already acknowledged

        Returns:
            True if updated, False if the alert does not exist or the guard refused it

        Raises:
            ValueError: If an update names an unknown or immutable field
        """
        encoded = encode_alert_fields(updates)
        key = RedisKeys.alert_detail(alert_id)

        async with self.redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    stored_id, acknowledged, timestamp = await pipe.hmget(
                        key, ["id", "acknowledged", "timestamp"]
                    )
                    if stored_id is None:
                        return False
                    if unless_acknowledged and acknowledged == "1":
                        return False

                    pipe.multi()
                    if encoded:
                        pipe.hset(key, mapping=encoded)
                    if "acknowledged" in updates:
                        if updates["acknowledged"]:
                            pipe.zrem(RedisKeys.ALERT_UNACKED, alert_id)
                        else:
                            pipe.zadd(RedisKeys.ALERT_UNACKED, {alert_id: int(timestamp)})
                    await pipe.execute()
                    break
                except WatchError:
                    logger.debug("Alert changed during update, retrying", alert_id=alert_id)
                    continue

        logger.debug("Alert updated", alert_id=alert_id, fields=sorted(updates))
        return True

    async def get(self, alert_id: str) -> Alert | None:
        """Get an alert by ID.

        Args:
            alert_id: Alert ID

        Returns:
            Alert if found, None otherwise
        """
        record = await self.redis.hgetall(RedisKeys.alert_detail(alert_id))
        if not record:
            return None
        return Alert.from_record(record)

    async def list_recent(self, limit: int = 100, include_acknowledged: bool = False) -> list[Alert]:
        """List the most recent alerts, newest first.

        Args:
            limit: Maximum number of alerts
            include_acknowledged: Include acknowledged alerts

        Returns:
            Alerts ordered by ingestion time descending
        """
        index = RedisKeys.ALERT_TIMELINE if include_acknowledged else RedisKeys.ALERT_UNACKED
        alert_ids = await self.redis.zrevrange(index, 0, limit - 1)
        return await self._load_many(alert_ids)

    async def delete_older_than(self, cutoff_ms: int) -> int:
        """Delete alerts received before a cutoff.

        Args:
            cutoff_ms: Epoch milliseconds; older alerts are removed

        Returns:
            Number of alerts deleted
        """
        alert_ids = await self.redis.zrangebyscore(RedisKeys.ALERT_TIMELINE, "-inf", f"({cutoff_ms}")
        if not alert_ids:
            return 0

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(*[RedisKeys.alert_detail(alert_id) for alert_id in alert_ids])
            pipe.zrem(RedisKeys.ALERT_TIMELINE, *alert_ids)
            pipe.zrem(RedisKeys.ALERT_UNACKED, *alert_ids)
            await pipe.execute()
        return len(alert_ids)

    async def _load_many(self, alert_ids: list[str]) -> list[Alert]:
        if not alert_ids:
            return []
        async with self.redis.pipeline(transaction=False) as pipe:
            for alert_id in alert_ids:
                pipe.hgetall(RedisKeys.alert_detail(alert_id))
            records = await pipe.execute()

        # A record can vanish between the index read and the fetch (retention sweep)
        return [Alert.from_record(record) for record in records if record]
