"""Database engine and session factory used by the relational store."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, event, text
from sqlmodel import Session, create_engine

from user_registry.app.runtime.config.config_data import DatabaseConfig


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII letters
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig, environment: str = "development"):
        """Initialize the shared database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        self._config = db_config

        engine_kwargs: dict[str, Any] = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(db_config, environment),
        }

        if db_config.is_memory:
            # Every session must see the same in-memory database
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        self._engine = create_engine(db_config.url, **engine_kwargs)
        if db_config.is_sqlite:
            event.listen(self._engine, "connect", _register_sqlite_functions)
        logger.info("Database engine initialized for {}", self._engine.url.render_as_string())

    def _get_connect_args(self, config: DatabaseConfig, environment: str) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if config.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,  # sessions are used from the worker threadpool
                    "timeout": 20,  # lock timeout
                }
            )

            if environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        elif "postgresql" in config.url:
            connect_args.update(
                {
                    "application_name": f"{environment}_user_registry",
                    "connect_timeout": 30,
                }
            )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Run the enclosed block in one transaction, rolling back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(error_type=type(e).__name__).debug(
                "Database transaction rolled back: {}", e
            )
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        """Create all database tables."""
        from sqlmodel import SQLModel

        from user_registry.app.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(error_type=type(e).__name__).error(
                "Database health check failed: {}", e
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
