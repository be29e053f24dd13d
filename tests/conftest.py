"""Pytest configuration and fixtures."""

from typing import AsyncIterator

import fakeredis
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from alarmageddon.core.config import Settings
from alarmageddon.services import Services, build_services
from tests.fakes import FakeChatClient


@pytest.fixture
def signing_key() -> Ed25519PrivateKey:
    """Ed25519 key standing in for Discord's interaction signing key."""
    return Ed25519PrivateKey.generate()


@pytest.fixture
def settings(signing_key: Ed25519PrivateKey) -> Settings:
    """Settings with channels and credentials configured."""
    public_key = signing_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw).hex()
    return Settings(
        default_channel_id="chan-default",
        db_channel_id="chan-db",
        webhook_token="secret-token",
        webhook_url_token="url-token",
        discord_public_key=public_key,
        discord_token="bot-token",
        recent_window=100,
    )


@pytest_asyncio.fixture
async def redis() -> AsyncIterator[fakeredis.FakeAsyncRedis]:
    """Isolated in-process Redis."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def chat() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def services(redis: fakeredis.FakeAsyncRedis, chat: FakeChatClient, settings: Settings) -> Services:
    """Service graph backed by fake Redis and the fake chat client."""
    return build_services(redis, chat, settings)


@pytest.fixture
def disk_payload() -> dict:
    """Sample disk alert payload."""
    return {
        "title": "Disk usage high",
        "message": "Root volume at 91%",
        "severity": "critical",
        "hostname": "web-01",
        "source": "prometheus",
    }


@pytest.fixture
def database_payload() -> dict:
    """Sample database alert payload."""
    return {
        "title": "Replica lag",
        "description": "Replica is 120s behind primary",
        "severity": "high",
        "service": "database",
        "source": "google-alerts",
    }
