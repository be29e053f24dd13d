"""Request ID propagation for log correlation."""

import uuid
from contextvars import ContextVar
from typing import Any

import structlog

REQUEST_ID_HEADER = "X-Request-ID"

# Context variable for request ID
_request_id: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    """Generate a new request ID."""
    return uuid.uuid4().hex[:16]


def set_request_id(request_id: str) -> None:
    """Set current request ID and bind it to the structlog context."""
    _request_id.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_id() -> None:
    """Clear current request ID."""
    _request_id.set("")
    structlog.contextvars.unbind_contextvars("request_id")


class RequestContext:
    """Context manager scoping a request ID."""

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or generate_request_id()

    def __enter__(self) -> str:
        set_request_id(self.request_id)
        return self.request_id

    def __exit__(self, *args: Any) -> None:
        clear_request_id()
