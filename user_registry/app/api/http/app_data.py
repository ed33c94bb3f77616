from dataclasses import dataclass

from user_registry.app.core.services import (
    DbSessionService,
    NotificationHub,
    UserEventPublisher,
    UserStore,
)


@dataclass
class ApplicationDependencies:
    user_store: UserStore
    notification_hub: NotificationHub
    user_events: UserEventPublisher
    # Only set when the relational store backend is selected
    database_service: DbSessionService | None = None
