"""Discord REST API client."""

from typing import Any

import httpx

from alarmageddon.core.config import Settings, get_settings
from alarmageddon.core.logging import get_logger
from alarmageddon.notification.channels.base import ChatClient, PostedMessage
from alarmageddon.observability.metrics import CHAT_REQUESTS

logger = get_logger(__name__)


class DiscordClient(ChatClient):
    """Discord bot client for posting and editing channel messages."""

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize HTTP client.

        Args:
            settings: Application settings
            transport: Optional httpx transport (used by tests)
        """
        settings = settings or get_settings()
        if not settings.discord_token:
            logger.warning("Discord token not configured")

        self._client = httpx.AsyncClient(
            base_url=settings.discord_api_base.rstrip("/") + "/",
            headers={
                "Authorization": f"Bot {settings.discord_token}",
                "User-Agent": f"DiscordBot (https://github.com/alarmageddon, {settings.app_version})",
            },
            timeout=settings.discord_timeout,
            transport=transport,
        )

    @property
    def platform(self) -> str:
        return "discord"

    async def post_message(self, channel_id: str, body: dict[str, Any]) -> PostedMessage | None:
        """Post a message via the Discord REST API.

        Args:
            channel_id: Destination channel ID
            body: Message body

        Returns:
            Identifiers of the created message, or None on failure
        """
        try:
            response = await self._client.post(f"channels/{channel_id}/messages", json=body)
        except httpx.HTTPError as e:
            CHAT_REQUESTS.labels(operation="post", status="error").inc()
            logger.error("Error sending message to Discord", channel_id=channel_id, error=str(e))
            return None

        if not response.is_success:
            CHAT_REQUESTS.labels(operation="post", status="failed").inc()
            logger.error(
                "Failed to send message to Discord",
                channel_id=channel_id,
                status_code=response.status_code,
                error=response.text,
            )
            return None

        try:
            message = response.json()
            posted = PostedMessage(
                message_id=str(message["id"]),
                channel_id=str(message.get("channel_id", channel_id)),
            )
        except (ValueError, KeyError, TypeError) as e:
            CHAT_REQUESTS.labels(operation="post", status="failed").inc()
            logger.error(
                "Unexpected Discord response body",
                channel_id=channel_id,
                status_code=response.status_code,
                error=str(e),
            )
            return None

        CHAT_REQUESTS.labels(operation="post", status="sent").inc()
        logger.info("Message sent to Discord", message_id=posted.message_id, channel_id=posted.channel_id)
        return posted

    async def edit_message(self, channel_id: str, message_id: str, body: dict[str, Any]) -> bool:
        """Edit a message via the Discord REST API.

        Args:
            channel_id: Channel holding the message
            message_id: Message to edit
            body: New message body

        Returns:
            True if edited successfully
        """
        try:
            response = await self._client.patch(f"channels/{channel_id}/messages/{message_id}", json=body)
        except httpx.HTTPError as e:
            CHAT_REQUESTS.labels(operation="edit", status="error").inc()
            logger.error("Error updating Discord message", message_id=message_id, error=str(e))
            return False

        if not response.is_success:
            CHAT_REQUESTS.labels(operation="edit", status="failed").inc()
            logger.error(
                "Failed to update Discord message",
                message_id=message_id,
                status_code=response.status_code,
                error=response.text,
            )
            return False

        CHAT_REQUESTS.labels(operation="edit", status="sent").inc()
        logger.info("Discord message updated", message_id=message_id)
        return True

    async def install_global_commands(self, app_id: str, commands: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Overwrite the application's global slash commands.

        Args:
            app_id: Discord application ID
            commands: Command definitions

        Returns:
            Commands as registered by Discord

        Raises:
            httpx.HTTPError: If the request fails
        """
        response = await self._client.put(f"applications/{app_id}/commands", json=commands)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()
