"""Tests for API error response formats."""

from typing import Any

from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

import alarmageddon.api.app as app_module
from alarmageddon.api.app import create_app
from alarmageddon.api.deps import get_services
from alarmageddon.core.config import Settings

AUTH = {"Authorization": "Bearer secret-token"}


class FakeOrchestrator:
    """Orchestrator raising a fixed error on ingest."""

    def __init__(self, error: Exception):
        self.error = error

    async def ingest(self, payload: dict[str, Any]) -> None:
        raise self.error


class FakeServices:
    """Minimal service container for error response tests."""

    def __init__(self, settings: Settings, error: Exception | None = None):
        self.settings = settings
        self.orchestrator = FakeOrchestrator(error or RuntimeError("boom"))


def _make_client(monkeypatch, services: FakeServices) -> TestClient:
    async def _noop() -> None:
        return None

    monkeypatch.setattr(app_module, "init_redis_pool", _noop)
    monkeypatch.setattr(app_module, "close_redis_pool", _noop)

    app = create_app()
    app.dependency_overrides[get_services] = lambda: services
    return TestClient(app, raise_server_exceptions=False)


def test_http_exception_response_format(monkeypatch, settings: Settings) -> None:
    client = _make_client(monkeypatch, FakeServices(settings))

    response = client.post("/webhooks/test", json={"title": "Disk usage high"})

    assert response.status_code == 401
    payload = response.json()
    assert payload["code"] == 401
    assert payload["message"] == "Unauthorized"
    assert "data" in payload


def test_validation_error_response_format(monkeypatch, settings: Settings) -> None:
    client = _make_client(monkeypatch, FakeServices(settings))

    response = client.get("/webhooks/recent", params={"limit": "many"}, headers=AUTH)

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == 422
    assert payload["message"] == "Validation error"
    assert isinstance(payload["data"], list)
    assert payload["data"]


def test_storage_error_response_format(monkeypatch, settings: Settings) -> None:
    services = FakeServices(settings, RedisConnectionError("connection refused"))
    client = _make_client(monkeypatch, services)

    response = client.post("/webhooks/test", json={"title": "Disk usage high"}, headers=AUTH)

    assert response.status_code == 503
    assert response.json() == {"code": 503, "message": "Storage unavailable", "data": None}


def test_unhandled_error_response_format(monkeypatch, settings: Settings) -> None:
    client = _make_client(monkeypatch, FakeServices(settings))

    response = client.post("/webhooks/test", json={"title": "Disk usage high"}, headers=AUTH)

    assert response.status_code == 500
    payload = response.json()
    assert payload["code"] == 500
    assert payload["message"] == "Internal server error"
