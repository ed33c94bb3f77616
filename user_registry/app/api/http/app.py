"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from user_registry.app.api.http.app_data import ApplicationDependencies
from user_registry.app.api.http.errors import (
    internal_error_body,
    register_exception_handlers,
)
from user_registry.app.api.http.middleware.security_headers import (
    SecurityHeadersMiddleware,
)
from user_registry.app.api.http.routers.health import router as health_router
from user_registry.app.api.http.routers.notifications import (
    router as notifications_router,
)
from user_registry.app.api.http.routers.users import router as users_router
from user_registry.app.api.utils.app_startup import configure_logging
from user_registry.app.core.services import (
    DbSessionService,
    NotificationHub,
    UserEventPublisher,
    build_user_store,
)
from user_registry.app.core.services.demo_data import seed_demo_data
from user_registry.app.runtime.config.config_data import ConfigData
from user_registry.app.runtime.context import get_config

__all__ = ["app", "build_dependencies", "create_app"]


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct the store, notifier and (optionally) database service."""
    database_service = None
    if config.store.backend == "database":
        database_service = DbSessionService(config.database, config.app.environment)

    user_store = build_user_store(config, database_service)
    notification_hub = NotificationHub(queue_size=config.notifications.queue_size)
    user_events = UserEventPublisher(
        notification_hub, config.notifications.users_channel
    )

    if config.demo_data.enabled:
        seed_demo_data(user_store, config.demo_data)

    return ApplicationDependencies(
        user_store=user_store,
        notification_hub=notification_hub,
        user_events=user_events,
        database_service=database_service,
    )


def create_app(config: ConfigData | None = None) -> FastAPI:
    """Build the application for ``config`` (the current context's config by default)."""
    config = config or get_config()
    environment = config.app.environment

    # --- Lifecycle ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application in {} environment", environment)
        app.state.app_dependencies = build_dependencies(config)
        try:
            yield
        finally:
            logger.info("Shutting down application")
            app_dependencies: ApplicationDependencies = app.state.app_dependencies
            if app_dependencies.database_service is not None:
                app_dependencies.database_service.dispose()

    app = FastAPI(
        title=config.app.service_name,
        version=config.app.version,
        lifespan=lifespan,
        docs_url=None if environment == "production" else "/docs",
        redoc_url=None if environment == "production" else "/redoc",
    )
    app.state.config = config

    app.add_middleware(SecurityHeadersMiddleware, environment=environment)

    # --- CORS configuration ---
    cors = config.app.cors
    if environment == "production" and "*" in cors.origins and cors.allow_credentials:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
        expose_headers=cors.expose_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Correlation / tracing
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

        start = time.perf_counter()

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content=internal_error_body(request.url.path),
                    headers={"X-Request-ID": request_id},
                )

    register_exception_handlers(app)

    # --- Router registration ---
    app.include_router(health_router)
    app.include_router(users_router, prefix="/users", tags=["users"])
    app.include_router(notifications_router)

    return app


def _build_default_app() -> FastAPI:
    config = get_config()
    configure_logging(config)
    return create_app(config)


app = _build_default_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
