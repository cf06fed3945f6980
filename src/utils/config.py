"""
Configuration management for the Anagrafiche import application.

This module handles:
- Database location (SQLite file per environment, or an explicit URL)
- Environment-specific configuration (development vs. production)
- Import settings (error list cap)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    APP_NAME,
    APP_VERSION,
    DATABASE_FILENAME,
    DATABASE_VERSION,
    DEFAULT_MAX_REPORTED_ERRORS,
)

logger = logging.getLogger(__name__)

ENV_VAR_ENVIRONMENT = "ANAGRAFICHE_ENV"
ENV_VAR_DATABASE_URL = "ANAGRAFICHE_DATABASE_URL"
ENV_VAR_MAX_REPORTED_ERRORS = "ANAGRAFICHE_MAX_REPORTED_ERRORS"


class Config:
    """
    Application configuration manager.

    Resolves the database location and import settings for one
    environment. Values from environment variables take precedence
    over the defaults.
    """

    def __init__(self, environment: str = "production"):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
        """
        self.environment = environment
        self._app_name = APP_NAME
        self._app_version = APP_VERSION
        self._database_version = DATABASE_VERSION

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_data_dir()

        self._database_path = self._base_dir / DATABASE_FILENAME
        self._database_url_override = os.environ.get(ENV_VAR_DATABASE_URL) or None
        self._max_reported_errors = self._read_max_reported_errors()

    def _get_project_data_dir(self) -> Path:
        """Project-local data/ directory used in development."""
        project_root = Path(__file__).parent.parent.parent
        return project_root / "data"

    def _get_user_data_dir(self) -> Path:
        """Per-user application directory used in production."""
        return Path.home() / ".anagrafiche"

    def _read_max_reported_errors(self) -> int:
        raw = os.environ.get(ENV_VAR_MAX_REPORTED_ERRORS)
        if raw is None or raw.strip() == "":
            return DEFAULT_MAX_REPORTED_ERRORS
        try:
            value = int(raw)
        except ValueError:
            logger.warning(
                f"Ignoring {ENV_VAR_MAX_REPORTED_ERRORS}={raw!r}: not an integer. "
                f"Using default {DEFAULT_MAX_REPORTED_ERRORS}."
            )
            return DEFAULT_MAX_REPORTED_ERRORS
        if value < 1:
            logger.warning(
                f"Ignoring {ENV_VAR_MAX_REPORTED_ERRORS}={value}: must be at least 1."
            )
            return DEFAULT_MAX_REPORTED_ERRORS
        return value

    @property
    def app_name(self) -> str:
        """Application name."""
        return self._app_name

    @property
    def app_version(self) -> str:
        """Application version."""
        return self._app_version

    @property
    def database_version(self) -> str:
        """Database schema version."""
        return self._database_version

    @property
    def database_path(self) -> Path:
        """Full path to the SQLite database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        Returns:
            The ANAGRAFICHE_DATABASE_URL override if set, otherwise a
            SQLite URL for the environment's database file
        """
        if self._database_url_override:
            return self._database_url_override
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def max_reported_errors(self) -> int:
        """Maximum error strings listed in a commit result before truncation."""
        return self._max_reported_errors

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def ensure_directories(self) -> None:
        """Create the database directory when a file-based default is used."""
        if self._database_url_override is None:
            self._database_path.parent.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(environment='{self.environment}', database_url='{self.database_url}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    ANAGRAFICHE_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    """Get the database URL."""
    return get_config().database_url
