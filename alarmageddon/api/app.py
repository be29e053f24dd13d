"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from redis.exceptions import RedisError

from alarmageddon.api.routes import interactions, webhooks
from alarmageddon.core.config import get_settings
from alarmageddon.core.logging import get_logger, setup_logging
from alarmageddon.notification.channels.discord import DiscordClient
from alarmageddon.observability.tracing import REQUEST_ID_HEADER, RequestContext
from alarmageddon.services import build_services
from alarmageddon.storage.redis_client import close_redis_pool, get_redis, init_redis_pool

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()

    # Startup
    setup_logging()
    logger.info("Starting application", app_name=settings.app_name, version=settings.app_version)

    await init_redis_pool()
    logger.info("Redis connection pool initialized")

    services = build_services(get_redis(), DiscordClient(settings), settings)
    app.state.services = services
    services.sweeper.start()
    logger.info(
        "Services initialized",
        chat_platform=services.chat.platform,
        retention_days=settings.retention_days,
        interval_seconds=settings.retention_interval_seconds,
    )

    yield

    # Shutdown
    logger.info("Shutting down application")
    await services.sweeper.stop()
    await services.chat.close()
    app.state.services = None
    await close_redis_pool()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Monitoring webhook to Discord notification bot",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def bind_request_id(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        with RequestContext(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    # Include routers
    app.include_router(webhooks.router)
    app.include_router(interactions.router)

    app.mount("/metrics", make_asgi_app())

    # Error response handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        content = {
            "code": exc.status_code,
            "message": detail if isinstance(detail, str) else "HTTP error",
            "data": None if isinstance(detail, str) else detail,
        }
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "code": 422,
                "message": "Validation error",
                "data": exc.errors(),
            },
        )

    @app.exception_handler(RedisError)
    async def storage_exception_handler(request: Request, exc: RedisError) -> JSONResponse:
        logger.error(
            "Storage error",
            error=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=503,
            content={"code": 503, "message": "Storage unavailable", "data": None},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=500,
            content={
                "code": 500,
                "message": "Internal server error",
                "data": str(exc) if settings.debug else None,
            },
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "version": settings.app_version}

    return app


# Application instance for uvicorn
app = create_app()
