"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# Notifications
from .notifications import NotificationHub, Notifier, UserEvent, UserEventPublisher

# User Stores
from .store import InMemoryUserStore, SqlUserStore, UserStore, build_user_store

__all__ = [
    # Database Service
    "DbSessionService",
    # Notifications
    "NotificationHub",
    "Notifier",
    "UserEvent",
    "UserEventPublisher",
    # User Stores
    "InMemoryUserStore",
    "SqlUserStore",
    "UserStore",
    "build_user_store",
]
