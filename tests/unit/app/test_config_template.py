"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from user_registry.app.runtime.config.config_data import ConfigData
from user_registry.app.runtime.config.config_template import (
    apply_environment_overrides,
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)

SAMPLE_YAML = """
config:
  app:
    environment: ${APP_ENVIRONMENT:-development}
    port: ${PORT:-8000}
  logging:
    file: ${LOG_FILE:-}
  database:
    url: ${DATABASE_URL:-sqlite:///./users.db}
  store:
    backend: ${STORE_BACKEND:-memory}
  demo_data:
    enabled: ${DEMO_DATA_ENABLED:-false}
    seed: ${DEMO_DATA_SEED:-}
  notifications:
    users_channel: /topic/users
"""


@pytest.fixture
def sample_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE_YAML, encoding="utf-8")
    return path


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_substitute_env_var_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-fallback}") == "fallback"
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_present_var_wins_over_default(self):
        with patch.dict(os.environ, {"PRESENT_VAR": "set"}):
            assert substitute_env_vars("${PRESENT_VAR:-fallback}") == "set"

    def test_missing_required_var(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="MISSING_VAR not set"):
                substitute_env_vars("${MISSING_VAR}")

    def test_missing_required_var_with_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="needed for storage"):
                substitute_env_vars("${DB:?needed for storage}")


class TestEnvironmentOverrides:
    def test_prefixed_variables_are_promoted(self):
        with patch.dict(os.environ, {"TEST_STORE_BACKEND": "database"}, clear=True):
            apply_environment_overrides("test")

            assert os.environ["STORE_BACKEND"] == "database"

    def test_other_environments_are_ignored(self):
        with patch.dict(os.environ, {"PRODUCTION_STORE_BACKEND": "database"}, clear=True):
            apply_environment_overrides("development")

            assert "STORE_BACKEND" not in os.environ


class TestLoadTemplatedYaml:
    """Test cases for load_templated_yaml function."""

    def test_defaults(self, sample_yaml):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(sample_yaml)

        assert config.app.environment == "development"
        assert config.logging.file is None
        assert config.store.backend == "memory"
        assert config.demo_data.enabled is False
        assert config.demo_data.seed is None

    def test_environment_values(self, sample_yaml):
        env_vars = {
            "APP_ENVIRONMENT": "test",
            "PORT": "9000",
            "STORE_BACKEND": "database",
            "DEMO_DATA_SEED": "17",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = load_templated_yaml(sample_yaml, env_mode="test")

        assert config.app.environment == "test"
        assert config.app.port == 9000
        assert config.store.backend == "database"
        assert config.demo_data.seed == 17

    def test_environment_prefixed_override(self, sample_yaml):
        with patch.dict(os.environ, {"TEST_DATABASE_URL": "sqlite://"}, clear=True):
            config = load_templated_yaml(sample_yaml, env_mode="test")

        assert config.database.url == "sqlite://"
        assert config.database.is_memory is True

    def test_invalid_value(self, sample_yaml):
        with patch.dict(os.environ, {"STORE_BACKEND": "redis"}, clear=True):
            with pytest.raises(ValueError, match="Invalid configuration"):
                load_templated_yaml(sample_yaml)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("config:\n  app: [unclosed bracket\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_templated_yaml(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_templated_yaml(path)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "missing.yaml")


class TestLoadConfig:
    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml", env_mode="test")

        assert isinstance(config, ConfigData)
        assert config.app.environment == "test"
        assert config.store.backend == "memory"
        assert config.notifications.users_channel == "/topic/users"

    def test_existing_file_is_loaded(self, sample_yaml):
        with patch.dict(os.environ, {"STORE_BACKEND": "database"}, clear=True):
            assert load_config(sample_yaml).store.backend == "database"
