"""Main settings composition.

This module composes the app, auth and database settings into a single
`Settings` class loaded from environment variables and `.env` files.

Environment Support:
- Development: Uses .env, debug mode enabled
- Test: Uses .env.test
- Staging: Uses .env.staging
- Production: Uses .env.production
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(AppSettings, AuthSettings, DatabaseSettings):
    """The settings class that aggregates all configuration for credentia.

    Usage:
        - Long-lived processes read the module-level `settings` instance.
        - Services and adapters take explicit overrides (work factor, token
          lifetime, database URL) so tests never need to mutate this object.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific defaults."""
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env == "development":
            self.DEBUG = True
            self.LOG_JSON = False
        logger.debug("credentia running in %s environment", env)


_ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}


def create_settings() -> Settings:
    """Create a settings instance for the environment named by ``APP_ENV``.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")
    env_file = _ENV_FILES.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info("Loading environment configuration from .env (environment: %s)", env)
        return Settings()
    logger.debug("No .env file found, using environment variables only (environment: %s)", env)
    return Settings()


settings = create_settings()
