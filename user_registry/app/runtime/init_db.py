"""Database initialization script."""

from user_registry.app.core.services.database.db_session import DbSessionService
from user_registry.app.runtime.context import get_config


def init_db() -> None:
    """Create all database tables for the configured database."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        db_service.create_all()
    finally:
        db_service.dispose()


if __name__ == "__main__":
    init_db()
