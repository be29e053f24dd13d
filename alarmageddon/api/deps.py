"""API dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from alarmageddon.services import Services


def get_services(request: Request) -> Services:
    """Get the service container built at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Application startup has not completed.")
    return services


# Type aliases for dependency injection
ServicesDep = Annotated[Services, Depends(get_services)]
