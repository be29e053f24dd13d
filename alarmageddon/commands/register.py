"""Install the slash commands on the Discord application."""

import asyncio
import sys

import httpx

from alarmageddon.commands.definitions import ALL_COMMANDS
from alarmageddon.core.config import get_settings
from alarmageddon.core.logging import get_logger, setup_logging
from alarmageddon.notification.channels.discord import DiscordClient

logger = get_logger(__name__)


async def register_commands() -> list[dict]:
    """Overwrite the global commands with ALL_COMMANDS."""
    settings = get_settings()
    if not settings.discord_app_id:
        raise RuntimeError("APP_ID is not configured")

    client = DiscordClient(settings)
    try:
        return await client.install_global_commands(settings.discord_app_id, ALL_COMMANDS)
    finally:
        await client.close()


def main() -> None:
    """Console entry point."""
    setup_logging()
    try:
        commands = asyncio.run(register_commands())
    except (RuntimeError, httpx.HTTPError) as e:
        logger.error("Failed to register commands", error=str(e))
        sys.exit(1)

    for command in commands:
        logger.info(
            "Command registered",
            name=command.get("name"),
            subcommands=[option["name"] for option in command.get("options", []) if option.get("type") == 1],
        )


if __name__ == "__main__":
    main()
