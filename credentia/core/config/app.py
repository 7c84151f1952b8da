"""
Application-wide settings.
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings such as the project name, environment
    and log output format.

    Security Note:
        - Keep LOG_LEVEL at INFO or above in production; DEBUG events include
          masked identifiers and token prefixes that are only useful locally.
    """
    PROJECT_NAME: str = "credentia"
    VERSION: str = "0.1.0"
    APP_ENV: str = Field(default="development", pattern="^(development|test|staging|production)$")
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """
        Upper-cases the configured log level so ``info`` and ``INFO`` are equivalent.

        Args:
            v: Raw log level from the environment.

        Returns:
            The upper-cased level name.
        """
        return v.upper() if isinstance(v, str) else v
