"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

from user_registry.app.core.services import (
    DbSessionService,
    UserStore,
    build_user_store,
)
from user_registry.app.runtime.config.config_data import ConfigData

# Initialize Rich console for colored output
console = Console()


@contextmanager
def open_store(config: ConfigData) -> Iterator[UserStore]:
    """Open the configured user store for the duration of a command."""
    db_service = None
    if config.store.backend == "database":
        db_service = DbSessionService(config.database, config.app.environment)
    try:
        yield build_user_store(config, db_service)
    finally:
        if db_service is not None:
            db_service.dispose()
