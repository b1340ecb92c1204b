"""
Configuration for the recipe steps engine.

The only thing that varies between environments is where the database
lives:

- production: ``~/.recipe_steps/recipe_steps.db``
- development: ``<project>/data/recipe_steps.db``
- test: an in-memory SQLite database

``RECIPE_STEPS_ENV`` selects the environment and ``RECIPE_STEPS_DATABASE_URL``
replaces the URL outright.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import DATABASE_FILENAME, ENV_VAR_DATABASE_URL, ENV_VAR_ENVIRONMENT

logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = ("production", "development", "test")


class Config:
    """
    Resolved database settings for one environment.

    An explicit database URL (argument or ``RECIPE_STEPS_DATABASE_URL``) wins
    over the environment default.
    """

    def __init__(self, environment: str = "production", database_url: Optional[str] = None):
        """
        Args:
            environment: 'production', 'development' or 'test'
            database_url: Optional SQLAlchemy URL overriding the default

        Raises:
            ValueError: If environment is not one of VALID_ENVIRONMENTS
        """
        if environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment '{environment}'. "
                f"Expected one of: {', '.join(VALID_ENVIRONMENTS)}"
            )

        self.environment = environment
        self._explicit_url = database_url or os.environ.get(ENV_VAR_DATABASE_URL)

        if environment == "development":
            data_dir = Path(__file__).resolve().parent.parent.parent / "data"
        else:
            data_dir = Path.home() / ".recipe_steps"
        self._database_path = data_dir / DATABASE_FILENAME

    @property
    def database_path(self) -> Path:
        """Location of the default SQLite file (unused for memory/explicit URLs)."""
        return self._database_path

    @property
    def uses_file_database(self) -> bool:
        return self._explicit_url is None and self.environment != "test"

    @property
    def database_url(self) -> str:
        if self._explicit_url:
            return self._explicit_url
        if self.environment == "test":
            return "sqlite:///:memory:"
        # SQLite URLs need forward slashes, also on Windows
        return "sqlite:///" + self._database_path.as_posix()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def ensure_directories(self) -> None:
        """Create the directory holding the default SQLite file."""
        if self.uses_file_database:
            self._database_path.parent.mkdir(parents=True, exist_ok=True)

    def database_exists(self) -> bool:
        """
        Whether the default SQLite file is already there.

        Memory and explicit-URL databases always count as existing.
        """
        if not self.uses_file_database:
            return True
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_url='{self.database_url}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Return the process-wide Config, creating it on first call.

    The first call fixes the environment (from the argument, then
    ``RECIPE_STEPS_ENV``, then production). Later calls asking for a
    different environment get the existing instance and a warning, so the
    database never changes underneath open sessions.
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = Config(
            environment or os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        )
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but the config "
            f"singleton already exists with environment='{_config_instance.environment}'; "
            f"keeping the existing database"
        )

    return _config_instance


def reset_config() -> None:
    """Forget the process-wide Config (tests)."""
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    return get_config().database_url
