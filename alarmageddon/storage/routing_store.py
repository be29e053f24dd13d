"""Routing decision storage operations."""

from redis.asyncio import Redis

from alarmageddon.models.routing import RoutingDecision
from alarmageddon.storage.redis_client import RedisKeys, get_redis


class RoutingDecisionStore:
    """Append-only routing decision log using Redis."""

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def save(self, decision: RoutingDecision) -> RoutingDecision:
        """Append a routing decision to the log.

        Args:
            decision: Decision to store

        Returns:
            The decision with its assigned sequence number
        """
        decision_id = await self.redis.incr(RedisKeys.ROUTING_SEQUENCE)
        stored = decision.model_copy(update={"decision_id": decision_id})

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(
                RedisKeys.routing_detail(decision_id),
                mapping={
                    "decision_id": str(decision_id),
                    "alert_id": stored.alert_id,
                    "action": stored.action.value,
                    "destination": stored.destination or "",
                    "reason": stored.reason,
                    "timestamp": stored.timestamp.isoformat(),
                },
            )
            pipe.zadd(
                RedisKeys.ROUTING_TIMELINE,
                {str(decision_id): int(stored.timestamp.timestamp() * 1000)},
            )
            await pipe.execute()

        return stored

    async def list_recent(self, limit: int = 100) -> list[RoutingDecision]:
        """List the most recent decisions, newest first.

        Args:
            limit: Maximum number of decisions

        Returns:
            List of decisions
        """
        decision_ids = await self.redis.zrevrange(RedisKeys.ROUTING_TIMELINE, 0, limit - 1)
        return await self._load_many(decision_ids)

    async def delete_older_than(self, cutoff_ms: int) -> int:
        """Delete decisions made before a cutoff.

        Args:
            cutoff_ms: Epoch milliseconds; older decisions are removed

        Returns:
            Number of decisions deleted
        """
        decision_ids = await self.redis.zrangebyscore(RedisKeys.ROUTING_TIMELINE, "-inf", f"({cutoff_ms}")
        if not decision_ids:
            return 0

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(*[RedisKeys.routing_detail(int(decision_id)) for decision_id in decision_ids])
            pipe.zrem(RedisKeys.ROUTING_TIMELINE, *decision_ids)
            await pipe.execute()
        return len(decision_ids)

    async def _load_many(self, decision_ids: list[str]) -> list[RoutingDecision]:
        if not decision_ids:
            return []
        async with self.redis.pipeline(transaction=False) as pipe:
            for decision_id in decision_ids:
                pipe.hgetall(RedisKeys.routing_detail(int(decision_id)))
            records = await pipe.execute()

        decisions = []
        for record in records:
            if not record:
                continue
            record["destination"] = record.get("destination") or None
            decisions.append(RoutingDecision.model_validate(record))
        return decisions
