"""Tests for configuration management."""

import logging

import pytest

from recipe_steps.utils.config import Config, get_config, get_database_url


class TestConfig:
    """Tests for the Config class."""

    def test_test_environment_uses_memory(self):
        config = Config("test")
        assert config.database_url == "sqlite:///:memory:"
        assert config.uses_file_database is False
        assert config.database_exists() is True

    def test_development_uses_project_data_dir(self):
        config = Config("development")
        assert config.database_path.parent.name == "data"
        assert config.database_path.name == "recipe_steps.db"
        assert config.database_url.startswith("sqlite:///")
        assert config.is_development

    def test_production_uses_home_dir(self):
        config = Config("production")
        assert config.database_path.parent.name == ".recipe_steps"
        assert config.is_production

    def test_explicit_url_wins(self):
        config = Config("development", database_url="sqlite:////tmp/other.db")
        assert config.database_url == "sqlite:////tmp/other.db"
        assert config.uses_file_database is False

    def test_env_var_url(self, monkeypatch):
        monkeypatch.setenv("RECIPE_STEPS_DATABASE_URL", "postgresql://localhost/recipes")
        assert Config("production").database_url == "postgresql://localhost/recipes"

    def test_unknown_environment(self):
        with pytest.raises(ValueError, match="Unknown environment 'staging'"):
            Config("staging")


class TestGetConfig:
    """Tests for the configuration singleton."""

    def test_environment_from_env_var(self, monkeypatch):
        monkeypatch.setenv("RECIPE_STEPS_ENV", "test")
        assert get_config().environment == "test"
        assert get_database_url() == "sqlite:///:memory:"

    def test_singleton(self):
        assert get_config("test") is get_config()

    def test_mismatched_environment_warns(self, caplog):
        get_config("test")

        with caplog.at_level(logging.WARNING):
            config = get_config("development")

        assert config.environment == "test"
        assert "singleton already exists" in caplog.text
