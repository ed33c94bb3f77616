"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Request
from fastapi.requests import HTTPConnection

from user_registry.app.api.http.app_data import ApplicationDependencies
from user_registry.app.core.services import (
    NotificationHub,
    UserEventPublisher,
    UserStore,
)
from user_registry.app.runtime.config.config_data import ConfigData


def get_user_store(request: Request) -> UserStore:
    """Get the user store instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_store


def get_user_events(request: Request) -> UserEventPublisher:
    """Get the publisher for user change events."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_events


def get_notification_hub(connection: HTTPConnection) -> NotificationHub:
    """Get the notification hub (usable from HTTP and WebSocket routes)."""
    app_deps: ApplicationDependencies = connection.app.state.app_dependencies
    return app_deps.notification_hub


def get_app_config(connection: HTTPConnection) -> ConfigData:
    """Get the configuration the application was created with."""
    return connection.app.state.config
