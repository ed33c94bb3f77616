"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:4173",
            "http://localhost:8081",
        ]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])
    expose_headers: list[str] = Field(default=["Location"])


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    service_name: str = Field(
        default="User Service", description="Service name reported by /health"
    )
    version: str = Field(default="1.0.0", description="Service version reported by /health")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )
    deduplicate_exceptions: bool = Field(
        default=True, description="Collapse bursts of identical exception logs"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./users.db",
        description="Database connection URL",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def is_memory(self) -> bool:
        """True for in-memory SQLite URLs, which need a single shared connection."""
        return self.is_sqlite and (
            self.url in ("sqlite://", "sqlite:///") or ":memory:" in self.url
        )


class StoreConfig(BaseModel):
    """Record store configuration."""

    backend: Literal["memory", "database"] = Field(
        default="memory", description="Where user records are kept"
    )


class DemoDataConfig(BaseModel):
    """Demo data seeding configuration."""

    enabled: bool = Field(default=False, description="Seed demo users at startup")
    count: int = Field(
        default=50, ge=0, description="Number of generated users on top of the baseline pair"
    )
    seed: int | None = Field(
        default=None, description="Random seed for reproducible demo data"
    )


class NotificationsConfig(BaseModel):
    """Change notification (WebSocket) configuration."""

    users_channel: str = Field(
        default="/topic/users", description="Channel receiving user change events"
    )
    allowed_origins: list[str] = Field(
        default=[
            "http://localhost:8080",
            "http://localhost:8081",
            "http://localhost:4173",
            "http://localhost:5173",
            "http://localhost:5174",
        ],
        description="Origins allowed to open a WebSocket ('*' allows any)",
    )
    queue_size: int = Field(
        default=100, gt=0, description="Pending messages kept per subscriber"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    store: StoreConfig = Field(
        default_factory=StoreConfig, description="Record store configuration"
    )
    demo_data: DemoDataConfig = Field(
        default_factory=DemoDataConfig, description="Demo data configuration"
    )
    notifications: NotificationsConfig = Field(
        default_factory=NotificationsConfig, description="Notification configuration"
    )
