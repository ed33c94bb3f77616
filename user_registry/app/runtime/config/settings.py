from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Bootstrap values loaded from environment variables and .env files.

    These decide which configuration file is read and which environment
    prefix is applied to overrides; everything else lives in config.yaml.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )
    config_file: str = Field(default="config.yaml")
