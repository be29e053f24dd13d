"""Silence registry: time-bounded suppression of matching alerts."""

import uuid
from datetime import datetime, timedelta, timezone

from alarmageddon.core.logging import get_logger
from alarmageddon.engine.duration import parse_duration
from alarmageddon.engine.matcher import compile_pattern, matches
from alarmageddon.models.alert import Alert
from alarmageddon.models.silence import MATCH_ALL_PATTERN, Silence
from alarmageddon.storage.silence_store import SilenceStore

logger = get_logger(__name__)


class SilenceRegistry:
    """Create, list and delete silences and check alerts against them."""

    def __init__(self, store: SilenceStore):
        """Initialize registry.

        Args:
            store: Silence storage
        """
        self._store = store

    async def create(
        self,
        pattern: str | None,
        duration: str,
        actor: str,
        now: datetime | None = None,
    ) -> Silence | None:
        """Create a silence.

        Args:
            pattern: Regular expression; empty means match everything
            duration: Duration string such as ``10m``
            actor: Name of the creating user
            now: Creation time (defaults to the current time)

        Returns:
            The new silence, or None if the duration is invalid

        Raises:
            InvalidPatternError: If the pattern is not a valid regular expression
        """
        pattern = pattern or MATCH_ALL_PATTERN
        compile_pattern(pattern)

        duration_ms = parse_duration(duration)
        if duration_ms is None:
            logger.info("Invalid silence duration", duration=duration)
            return None

        created_at = now or datetime.now(timezone.utc)
        try:
            expires_at = created_at + timedelta(milliseconds=duration_ms)
        except OverflowError:
            logger.info("Silence duration out of range", duration=duration)
            return None

        silence = Silence(
            id=f"silence_{uuid.uuid4().hex[:8]}",
            pattern=pattern,
            duration=duration,
            created_by=actor,
            created_at=created_at,
            expires_at=expires_at,
        )
        await self._store.save(silence)

        logger.info(
            "Silence created",
            silence_id=silence.id,
            pattern=silence.pattern,
            duration=duration,
            expires_at=silence.expires_at.isoformat(),
            created_by=actor,
        )
        return silence

    async def list_active(self, now: datetime | None = None) -> list[Silence]:
        """List effective silences, most recently created first."""
        return await self._store.list_active(now)

    async def delete(self, silence_id: str) -> bool:
        """Deactivate a silence.

        Args:
            silence_id: Silence ID

        Returns:
            True if an active silence existed
        """
        deleted = await self._store.deactivate(silence_id)
        if deleted:
            logger.info("Silence deleted", silence_id=silence_id)
        else:
            logger.info("Silence not found for deletion", silence_id=silence_id)
        return deleted

    async def is_alert_silenced(self, alert: Alert, now: datetime | None = None) -> Silence | None:
        """Find the first effective silence matching an alert.

        Args:
            alert: Alert to check
            now: Reference time (defaults to the current time)

        Returns:
            Matching silence, or None
        """
        for silence in await self.list_active(now):
            try:
                matched = matches(silence.pattern, alert)
            except ValueError as e:
                logger.warning("Skipping silence with invalid pattern", silence_id=silence.id, error=str(e))
                continue

            if matched:
                logger.debug(
                    "Alert matched silence",
                    alert_id=alert.id,
                    silence_id=silence.id,
                    pattern=silence.pattern,
                )
                return silence
        return None
