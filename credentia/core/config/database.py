"""
Database connection settings.
"""
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Defines settings for the SQL store adapters.

    DATABASE_URL must name an async SQLAlchemy driver (``sqlite+aiosqlite``,
    ``postgresql+asyncpg``). A synchronous psycopg2 URL is rewritten to its
    asyncpg equivalent.

    Security Note:
        - DATABASE_URL may embed credentials; it is never logged.
    """
    DATABASE_URL: str = "sqlite+aiosqlite:///./credentia.db"
    DATABASE_ECHO: bool = False

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_async_url(cls, v: str | None) -> str:
        """
        Falls back to the local SQLite file and swaps sync drivers for async ones.

        Args:
            v: Explicitly provided URL or None.

        Returns:
            An async-capable database URL.
        """
        if not v:
            return "sqlite+aiosqlite:///./credentia.db"
        if v.startswith("postgresql+psycopg2://"):
            logger.debug("Rewriting psycopg2 DATABASE_URL to asyncpg driver.")
            return v.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v
