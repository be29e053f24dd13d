"""Base class for chat platform clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PostedMessage:
    """Identifiers of a message created on the chat platform."""

    message_id: str
    channel_id: str


class ChatClient(ABC):
    """Abstract chat platform client.

    Implementations are best-effort: failures are logged and reported
    through the return value instead of raised.
    """

    @property
    @abstractmethod
    def platform(self) -> str:
        """Return platform identifier."""
        pass

    @abstractmethod
    async def post_message(self, channel_id: str, body: dict[str, Any]) -> PostedMessage | None:
        """Post a message to a channel.

        Args:
            channel_id: Destination channel
            body: Message body (content, embeds, components)

        Returns:
            Identifiers of the created message, or None on failure
        """
        pass

    @abstractmethod
    async def edit_message(self, channel_id: str, message_id: str, body: dict[str, Any]) -> bool:
        """Replace the body of an existing message.

        Args:
            channel_id: Channel holding the message
            message_id: Message to edit
            body: New message body

        Returns:
            True if edited successfully
        """
        pass

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass
