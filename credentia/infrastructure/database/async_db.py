"""
Asynchronous Database Utilities Module

This module provides the async SQLAlchemy plumbing the SQL store adapters
run on: engine construction from settings, a session factory, a
session context manager and table creation.

Engines are built on demand rather than at import time so that importing
credentia never opens a connection and tests can point at their own
database URL.

**Security Note**: The database URL can embed credentials. It is never
logged here.

Key Components:
    - build_async_engine: Create an AsyncEngine from settings or an explicit URL.
    - build_session_factory: Session factory with ``expire_on_commit=False``.
    - get_async_db: Context manager yielding a session, rolling back on error.
    - create_async_db_and_tables: Create the credentia tables.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger

from credentia.core.config.settings import settings

# Imported for their side effect of registering tables on SQLModel.metadata.
from credentia.domain.entities import Account, VerificationToken  # noqa: F401

logger = get_logger(__name__)


def build_async_engine(
    url: Optional[str] = None, echo: Optional[bool] = None, **engine_kwargs
) -> AsyncEngine:
    """
    Build the asynchronous engine.

    Args:
        url: Database URL; defaults to ``settings.DATABASE_URL``.
        echo: Echo SQL statements; defaults to ``settings.DATABASE_ECHO``.
        **engine_kwargs: Passed through to ``create_async_engine`` (pool class, connect args).

    Returns:
        AsyncEngine: A new engine. The caller owns it and must dispose it.
    """
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO if echo is None else echo,
        future=True,
        **engine_kwargs,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory for the store adapters.

    Sessions do not expire objects on commit: each repository call commits on
    its own and the identity service keeps reading the entities it loaded.
    """
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_async_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession, rolling back if the body raises.

    Yields:
        AsyncSession: An asynchronous database session.
    """
    async with session_factory() as session:
        logger.debug("Async database session created")
        try:
            yield session
        except Exception:  # noqa: BLE001 – Any DB error must trigger rollback
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()
            logger.debug("Async database session closed")


async def create_async_db_and_tables(engine: AsyncEngine) -> None:
    """
    Create the credentia tables (test suites and local development).

    Production schemas are managed with Alembic.
    """
    logger.info("Creating async database tables")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async database tables created")
