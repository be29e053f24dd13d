"""Redis client management."""

import redis.asyncio as redis
from redis.asyncio import Redis

from alarmageddon.core.config import get_settings

# Global connection pool
_pool: redis.ConnectionPool | None = None


async def init_redis_pool() -> None:
    """Initialize Redis connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
            max_connections=20,
        )


async def close_redis_pool() -> None:
    """Close Redis connection pool."""
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None


def get_redis() -> Redis:
    """Get Redis client from pool.

    Returns:
        Redis client instance

    Raises:
        RuntimeError: If pool not initialized
    """
    if _pool is None:
        raise RuntimeError("Redis pool not initialized. Call init_redis_pool() first.")
    return redis.Redis(connection_pool=_pool)


# Key prefixes
class RedisKeys:
    """Redis key patterns."""

    # Alerts
    ALERT_DETAIL = "alarmageddon:alerts:detail:{alert_id}"
    ALERT_TIMELINE = "alarmageddon:alerts:timeline"
    ALERT_UNACKED = "alarmageddon:alerts:unacked"

    # Silences
    SILENCE_DETAIL = "alarmageddon:silences:detail:{silence_id}"
    SILENCE_ALL = "alarmageddon:silences:all"
    SILENCE_ACTIVE = "alarmageddon:silences:active"

    # Routing decisions
    ROUTING_DETAIL = "alarmageddon:routing:detail:{decision_id}"
    ROUTING_TIMELINE = "alarmageddon:routing:timeline"
    ROUTING_SEQUENCE = "alarmageddon:routing:sequence"

    @classmethod
    def alert_detail(cls, alert_id: str) -> str:
        return cls.ALERT_DETAIL.format(alert_id=alert_id)

    @classmethod
    def silence_detail(cls, silence_id: str) -> str:
        return cls.SILENCE_DETAIL.format(silence_id=silence_id)

    @classmethod
    def routing_detail(cls, decision_id: int) -> str:
        return cls.ROUTING_DETAIL.format(decision_id=decision_id)
