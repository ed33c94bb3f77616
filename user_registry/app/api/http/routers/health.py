"""Health check endpoints router for monitoring service availability."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from user_registry.app.api.http.app_data import ApplicationDependencies
from user_registry.app.api.http.deps import get_app_config
from user_registry.app.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(config: ConfigData = Depends(get_app_config)) -> dict[str, str]:
    """Liveness probe: returns 200 as long as the process is running.

    It does not check dependencies.
    """
    return {
        "status": "UP",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": config.app.service_name,
        "version": config.app.version,
    }


@router.get("/ready", response_model=None)
def readiness(
    request: Request, config: ConfigData = Depends(get_app_config)
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 if the store (and its database) can serve requests, else 503."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies

    checks = {}
    all_healthy = True

    try:
        store_healthy = app_deps.user_store.health_check()
        checks["store"] = {
            "status": "healthy" if store_healthy else "unhealthy",
            "type": config.store.backend,
            "users": app_deps.user_store.count() if store_healthy else None,
        }
        if not store_healthy:
            all_healthy = False
    except Exception as e:
        checks["store"] = {
            "status": "unhealthy",
            "type": config.store.backend,
            "error": str(e),
        }
        all_healthy = False

    if app_deps.database_service is not None:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "postgresql" if "postgresql" in config.database.url else "sqlite",
        }
        if not db_healthy:
            all_healthy = False

    checks["notifications"] = {
        "status": "healthy",
        "channel": config.notifications.users_channel,
        "subscribers": app_deps.notification_hub.subscriber_count(
            config.notifications.users_channel
        ),
    }

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
