"""Discord interactions endpoint."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from alarmageddon.api.deps import ServicesDep
from alarmageddon.api.security import verify_interaction_signature
from alarmageddon.commands.handlers import CommandDispatcher
from alarmageddon.core.logging import get_logger
from alarmageddon.schemas.interaction import Interaction, InteractionResponseType, InteractionType

logger = get_logger(__name__)

router = APIRouter(tags=["interactions"])


@router.post("/interactions")
async def handle_interaction(
    services: ServicesDep,
    body: bytes = Depends(verify_interaction_signature),
) -> dict[str, Any]:
    """Handle a signed Discord interaction."""
    try:
        interaction = Interaction.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Malformed interaction", errors=e.error_count())
        raise HTTPException(status_code=400, detail="Malformed interaction")

    if interaction.type == InteractionType.PING:
        return {"type": InteractionResponseType.PONG}

    dispatcher = CommandDispatcher(services)
    if interaction.type == InteractionType.APPLICATION_COMMAND:
        data = await dispatcher.dispatch_command(interaction)
        if data is None:
            logger.error("Unknown command", command=interaction.command_name, subcommand=interaction.subcommand)
            raise HTTPException(status_code=400, detail="unknown command")
    elif interaction.type == InteractionType.MESSAGE_COMPONENT:
        data = await dispatcher.dispatch_component(interaction)
        if data is None:
            logger.error("Unknown component", custom_id=interaction.data.custom_id if interaction.data else None)
            raise HTTPException(status_code=400, detail="unknown component")
    else:
        logger.error("Unknown interaction type", type=interaction.type)
        raise HTTPException(status_code=400, detail="unknown interaction type")

    return {"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": data}
