"""Request authentication for webhooks and Discord interactions."""

import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from fastapi import Header, HTTPException, Query, Request

from alarmageddon.api.deps import ServicesDep
from alarmageddon.core.config import Settings
from alarmageddon.core.logging import get_logger
from alarmageddon.observability.metrics import WEBHOOKS_REJECTED

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def _token_equals(candidate: str, expected: str) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(candidate.encode(), expected.encode())


def validate_bearer_token(
    authorization: str | None,
    query_token: str | None,
    settings: Settings,
) -> bool:
    """Check webhook credentials.

    Accepts ``Authorization: Bearer <webhook_token>`` or
    ``?token=<webhook_url_token>``. An unconfigured token never matches.
    """
    if authorization and authorization.startswith(BEARER_PREFIX):
        if _token_equals(authorization[len(BEARER_PREFIX):], settings.webhook_token):
            return True
    if query_token and _token_equals(query_token, settings.webhook_url_token):
        return True
    return False


async def require_webhook_token(
    request: Request,
    services: ServicesDep,
    authorization: str | None = Header(default=None),
    token: str | None = Query(default=None, description="Webhook URL token"),
) -> None:
    """Reject webhook requests without valid credentials."""
    if validate_bearer_token(authorization, token, services.settings):
        return

    WEBHOOKS_REJECTED.inc()
    logger.warning(
        "Unauthorized webhook attempt",
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        path=request.url.path,
    )
    raise HTTPException(status_code=401, detail="Unauthorized")


def verify_signature(public_key: str, signature: str, timestamp: str, body: bytes) -> bool:
    """Verify a Discord Ed25519 request signature."""
    try:
        key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key))
        key.verify(bytes.fromhex(signature), timestamp.encode() + body)
    except (ValueError, InvalidSignature):
        return False
    return True


async def verify_interaction_signature(
    request: Request,
    services: ServicesDep,
    x_signature_ed25519: str | None = Header(default=None),
    x_signature_timestamp: str | None = Header(default=None),
) -> bytes:
    """Verify an interaction request and return its raw body."""
    body = await request.body()
    public_key = services.settings.discord_public_key
    if not public_key:
        logger.error("Interaction received but no Discord public key is configured")
        raise HTTPException(status_code=401, detail="invalid request signature")

    if (
        not x_signature_ed25519
        or not x_signature_timestamp
        or not verify_signature(public_key, x_signature_ed25519, x_signature_timestamp, body)
    ):
        logger.warning(
            "Rejected interaction with invalid signature",
            ip=request.client.host if request.client else None,
        )
        raise HTTPException(status_code=401, detail="invalid request signature")

    return body
