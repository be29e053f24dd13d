"""Slash command and component handlers."""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from redis.exceptions import RedisError

from alarmageddon.core.logging import get_logger
from alarmageddon.engine.acknowledgment import AckOutcome
from alarmageddon.engine.matcher import InvalidPatternError
from alarmageddon.models.silence import MATCH_ALL_PATTERN
from alarmageddon.notification.formatter import (
    ACK_BUTTON_PREFIX,
    ephemeral,
    format_alert_list,
    format_routing_decisions,
    format_routing_stats,
    format_silence_list,
    format_time,
)
from alarmageddon.schemas.interaction import Interaction
from alarmageddon.services import Services

logger = get_logger(__name__)

Handler = Callable[[Interaction], Awaitable[dict[str, Any] | None]]

ROUTING_RECENT_LIMIT = 10


class CommandDispatcher:
    """Dispatches interactions to handlers and builds reply payloads.

    Handlers return the ``data`` part of a channel message response, or
    None when the command or subcommand is unknown.
    """

    def __init__(self, services: Services):
        self._services = services
        self._commands: dict[str, Handler] = {
            "ping": self._ping,
            "webhook": self._webhook,
            "alert": self._alert,
            "silence": self._silence,
            "routing": self._routing,
        }

    async def dispatch_command(self, interaction: Interaction) -> dict[str, Any] | None:
        """Run a slash command."""
        handler = self._commands.get(interaction.command_name or "")
        if handler is None:
            return None

        logger.info(
            "Handling command",
            command=interaction.command_name,
            subcommand=interaction.subcommand,
            interaction_id=interaction.id,
            actor=interaction.actor,
        )
        return await self._guard(handler, interaction)

    async def dispatch_component(self, interaction: Interaction) -> dict[str, Any] | None:
        """Handle a message component (button) interaction."""
        custom_id = interaction.data.custom_id if interaction.data else None
        if not custom_id or not custom_id.startswith(ACK_BUTTON_PREFIX):
            return None

        logger.info("Handling acknowledge button", interaction_id=interaction.id, actor=interaction.actor)
        return await self._guard(self._ack_button, interaction)

    async def _guard(self, handler: Handler, interaction: Interaction) -> dict[str, Any] | None:
        try:
            return await handler(interaction)
        except InvalidPatternError as e:
            logger.info("Invalid pattern in command", command=interaction.command_name, pattern=e.pattern)
            return ephemeral(f"❌ Invalid pattern `{e.pattern}`: {e.reason}")
        except RedisError as e:
            logger.error(
                "Storage error while handling interaction",
                interaction_id=interaction.id,
                command=interaction.command_name,
                error=str(e),
            )
            return ephemeral("❌ Storage unavailable, please try again later")

    async def _ping(self, interaction: Interaction) -> dict[str, Any]:
        return {"content": "Pong!"}

    async def _webhook(self, interaction: Interaction) -> dict[str, Any] | None:
        if interaction.subcommand != "test":
            return None

        alert = await self._services.orchestrator.ingest({
            "title": "Test Alert",
            "message": "This is a test webhook triggered from Discord",
            "severity": "info",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": "discord-test",
        })
        return {"content": f"✅ Test webhook sent successfully! Alert ID: `{alert.id}`"}

    async def _alert(self, interaction: Interaction) -> dict[str, Any] | None:
        subcommand = interaction.subcommand
        if subcommand == "list":
            alerts = await self._services.alerts.list_recent(
                self._services.settings.alert_list_limit,
                include_acknowledged=True,
            )
            return format_alert_list(alerts)

        if subcommand == "ack":
            alert_id = interaction.option("id")
            if alert_id:
                return await self._ack_one(alert_id, interaction.actor)
            return await self._ack_pattern(interaction.option("pattern") or MATCH_ALL_PATTERN, interaction.actor)

        return None

    async def _ack_one(self, alert_id: str, actor: str) -> dict[str, Any]:
        result = await self._services.acknowledgments.acknowledge_by_id(alert_id, actor)
        if result.outcome == AckOutcome.NOT_FOUND:
            return ephemeral(f"❌ Alert `{alert_id}` not found")
        if result.outcome == AckOutcome.ALREADY_ACKNOWLEDGED:
            by = result.alert.acknowledged_by if result.alert else "someone"
            return ephemeral(f"ℹ️ Alert `{alert_id}` was already acknowledged by {by}")
        return ephemeral(f"✅ Alert `{alert_id}` acknowledged successfully")

    async def _ack_pattern(self, pattern: str, actor: str) -> dict[str, Any]:
        result = await self._services.acknowledgments.acknowledge_by_pattern(pattern, actor)
        if not result.acknowledged and not result.failed:
            return ephemeral(f"No unacknowledged alerts match `{pattern}`")

        lines = [f"✅ Acknowledged {len(result.acknowledged)} alert(s) matching `{pattern}`"]
        if result.failed:
            lines.append(f"⚠️ Failed to acknowledge {len(result.failed)} alert(s): " + ", ".join(
                f"`{alert_id}`" for alert_id in result.failed
            ))
        return ephemeral("\n".join(lines))

    async def _ack_button(self, interaction: Interaction) -> dict[str, Any]:
        alert_id = interaction.data.custom_id[len(ACK_BUTTON_PREFIX):]
        actor = interaction.actor
        result = await self._services.acknowledgments.acknowledge_by_id(alert_id, actor, mode="button")
        if result.ok:
            return ephemeral(f"✅ Alert acknowledged by {actor}")
        if result.outcome == AckOutcome.ALREADY_ACKNOWLEDGED:
            return ephemeral("ℹ️ Alert already acknowledged")
        return ephemeral("❌ Alert not found")

    async def _silence(self, interaction: Interaction) -> dict[str, Any] | None:
        subcommand = interaction.subcommand
        silences = self._services.silences

        if subcommand == "create":
            duration = interaction.option("duration")
            if not duration:
                return ephemeral("❌ Missing required option: duration")
            pattern = interaction.option("pattern") or MATCH_ALL_PATTERN
            silence = await silences.create(pattern, duration, interaction.actor)
            if silence is None:
                return ephemeral("❌ Invalid duration format. Use formats like 30s, 5m, 2h, 1d")
            return ephemeral(
                f"🔕 Silence `{silence.id}` created for pattern `{silence.pattern}`, "
                f"expires at {format_time(silence.expires_at)}"
            )

        if subcommand == "list":
            return format_silence_list(await silences.list_active())

        if subcommand == "delete":
            silence_id = interaction.option("id")
            if not silence_id:
                return ephemeral("❌ Missing required option: id")
            if await silences.delete(silence_id):
                return ephemeral(f"✅ Silence `{silence_id}` deleted")
            return ephemeral(f"❌ Silence `{silence_id}` not found")

        return None

    async def _routing(self, interaction: Interaction) -> dict[str, Any] | None:
        router = self._services.router
        if interaction.subcommand == "stats":
            return format_routing_stats(await router.get_stats())
        if interaction.subcommand == "recent":
            return format_routing_decisions(await router.get_recent_decisions(ROUTING_RECENT_LIMIT))
        return None
