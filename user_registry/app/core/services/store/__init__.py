"""User store implementations and factory."""

from loguru import logger

from user_registry.app.core.services.database.db_session import DbSessionService
from user_registry.app.runtime.config.config_data import ConfigData

from .base import UserStore
from .memory import InMemoryUserStore
from .sql import SqlUserStore


def build_user_store(
    config: ConfigData, db_service: DbSessionService | None = None
) -> UserStore:
    """Create the store selected by ``config.store.backend``.

    The relational backend needs ``db_service``; its tables are created if
    they do not exist yet.
    """
    if config.store.backend == "database":
        if db_service is None:
            raise ValueError("The database store backend requires a DbSessionService")
        db_service.create_all()
        logger.info("Using relational user store")
        return SqlUserStore(db_service)

    logger.info("Using in-memory user store")
    return InMemoryUserStore()


__all__ = ["InMemoryUserStore", "SqlUserStore", "UserStore", "build_user_store"]
