"""AuditToolbox Gateway: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ToolboxError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Rate-limit sweeper runs only between lifespan startup and shutdown
    - Shutdown closes every open session so streams end cleanly

Design Decisions:
    - create_app() factory: tests inject settings, a ManualClock or a prebuilt Gateway
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolbox_gateway.api.error_handlers import register_error_handlers
from toolbox_gateway.api.routes import health, messages, sse_stream
from toolbox_gateway.config import Settings, get_settings
from toolbox_gateway.core.clock import Clock
from toolbox_gateway.infrastructure.observability import setup_logging
from toolbox_gateway.services.gateway import Gateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    gateway: Gateway = app.state.gateway
    settings = gateway.settings
    setup_logging(settings.log_level, settings.log_format)
    gateway.sweeper.start()
    logger.info(f"{settings.service_name} {settings.service_version} started")
    yield
    await gateway.sweeper.stop()
    closed = gateway.close_all()
    logger.info(f"{settings.service_name} shutting down ({closed} sessions closed)")


def create_app(
    settings: Settings | None = None,
    gateway: Gateway | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    if gateway is None:
        gateway = Gateway(settings or get_settings(), clock=clock)
    settings = gateway.settings

    app = FastAPI(
        title="AuditToolbox Gateway", version=settings.service_version, lifespan=lifespan,
    )
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(sse_stream.router)
    app.include_router(messages.router)

    register_error_handlers(app)
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "toolbox_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
