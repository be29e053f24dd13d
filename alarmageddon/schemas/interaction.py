"""Discord interaction schemas."""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field


class InteractionType(IntEnum):
    """Interaction types sent by Discord."""

    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3


class InteractionResponseType(IntEnum):
    """Interaction response types."""

    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4


class InteractionUser(BaseModel):
    """Invoking Discord user."""

    id: str
    username: str = "Unknown"


class InteractionMember(BaseModel):
    """Guild member wrapper around the invoking user."""

    user: InteractionUser | None = None


class CommandOption(BaseModel):
    """Slash command option or subcommand."""

    name: str
    type: int
    value: Any = None
    options: list["CommandOption"] = Field(default_factory=list)


class InteractionData(BaseModel):
    """Command or component payload of an interaction."""

    name: str | None = None
    options: list[CommandOption] = Field(default_factory=list)
    custom_id: str | None = None


class Interaction(BaseModel):
    """Incoming Discord interaction."""

    id: str
    type: int
    data: InteractionData | None = None
    member: InteractionMember | None = None
    user: InteractionUser | None = None

    @property
    def invoker(self) -> InteractionUser | None:
        if self.member and self.member.user:
            return self.member.user
        return self.user

    @property
    def actor(self) -> str:
        """Username of the invoking user."""
        invoker = self.invoker
        return invoker.username if invoker else "Unknown"

    @property
    def command_name(self) -> str | None:
        return self.data.name if self.data else None

    @property
    def subcommand(self) -> str | None:
        """Name of the first subcommand, if any."""
        if not self.data or not self.data.options:
            return None
        first = self.data.options[0]
        return first.name if first.type == 1 else None

    def option(self, name: str, default: Any = None) -> Any:
        """Value of an option, looking inside the subcommand if present."""
        if not self.data:
            return default
        options = self.data.options
        if options and options[0].type == 1:
            options = options[0].options
        for option in options:
            if option.name == name:
                return option.value
        return default
