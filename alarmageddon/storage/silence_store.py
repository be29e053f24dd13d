"""Silence storage operations."""

from datetime import datetime, timezone

from redis.asyncio import Redis
from redis.exceptions import WatchError

from alarmageddon.core.logging import get_logger
from alarmageddon.models.silence import Silence
from alarmageddon.storage.redis_client import RedisKeys, get_redis

logger = get_logger(__name__)


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class SilenceStore:
    """Silence storage using Redis.

    Silences are never removed; deletion and expiry clear the ``active``
    flag and drop the ID from ``SILENCE_ACTIVE``.
    """

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def save(self, silence: Silence) -> Silence:
        """Persist a new silence.

        Args:
            silence: Silence to store

        Returns:
            The stored silence
        """
        score = _epoch_ms(silence.created_at)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(RedisKeys.silence_detail(silence.id), mapping=silence.to_record())
            pipe.zadd(RedisKeys.SILENCE_ALL, {silence.id: score})
            if silence.active:
                pipe.zadd(RedisKeys.SILENCE_ACTIVE, {silence.id: score})
            await pipe.execute()

        logger.debug("Silence saved", silence_id=silence.id)
        return silence

    async def get(self, silence_id: str) -> Silence | None:
        """Get a silence by ID.

        Args:
            silence_id: Silence ID

        Returns:
            Silence if found, None otherwise
        """
        record = await self.redis.hgetall(RedisKeys.silence_detail(silence_id))
        if not record:
            return None
        return Silence.from_record(record)

    async def list_active(self, now: datetime | None = None) -> list[Silence]:
        """List silences that are active and not yet expired.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            Effective silences, most recently created first
        """
        now = now or datetime.now(timezone.utc)
        silence_ids = await self.redis.zrevrange(RedisKeys.SILENCE_ACTIVE, 0, -1)
        silences = await self._load_many(silence_ids)
        return [silence for silence in silences if silence.is_effective(now)]

    async def list_all(self, limit: int = 50) -> list[Silence]:
        """List silences regardless of state, most recently created first.

        Args:
            limit: Maximum number of silences

        Returns:
            List of silences
        """
        silence_ids = await self.redis.zrevrange(RedisKeys.SILENCE_ALL, 0, limit - 1)
        return await self._load_many(silence_ids)

    async def deactivate(self, silence_id: str) -> bool:
        """Mark a silence inactive.

        Args:
            silence_id: Silence ID

        Returns:
            True if an active silence was deactivated, False otherwise
        """
        key = RedisKeys.silence_detail(silence_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    active = await pipe.hget(key, "active")
                    if active != "1":
                        return False
                    pipe.multi()
                    pipe.hset(key, "active", "0")
                    pipe.zrem(RedisKeys.SILENCE_ACTIVE, silence_id)
                    await pipe.execute()
                    return True
                except WatchError:
                    continue

    async def deactivate_expired(self, now: datetime | None = None) -> int:
        """Deactivate silences whose expiration has passed.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            Number of silences deactivated
        """
        now = now or datetime.now(timezone.utc)
        silence_ids = await self.redis.zrange(RedisKeys.SILENCE_ACTIVE, 0, -1)
        expired = 0
        for silence in await self._load_many(silence_ids):
            if silence.is_expired(now) and await self.deactivate(silence.id):
                expired += 1
        return expired

    async def _load_many(self, silence_ids: list[str]) -> list[Silence]:
        if not silence_ids:
            return []
        async with self.redis.pipeline(transaction=False) as pipe:
            for silence_id in silence_ids:
                pipe.hgetall(RedisKeys.silence_detail(silence_id))
            records = await pipe.execute()
        return [Silence.from_record(record) for record in records if record]
