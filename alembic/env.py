"""
Alembic environment configuration for credentia's database migrations.

This script sets up the migration context, connects to the database using
settings.DATABASE_URL, and targets the SQLModel metadata of the credentia
entities. Migrations run through the async engine, so the same async URL
the store adapters use works here.
"""
import asyncio  # For running the async migration entry point
from logging.config import fileConfig  # For configuring logging

from sqlalchemy import pool  # For database connection
from sqlalchemy.ext.asyncio import async_engine_from_config  # Async engine for migrations
from sqlmodel import SQLModel  # For metadata

from alembic import context  # For migration context
from credentia.core.config.settings import settings
from credentia.domain.entities import Account, VerificationToken  # noqa: F401  Registers tables

# Alembic Config object, provides access to alembic.ini
config = context.config

# Set database URL from settings for consistency with the store adapters
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Configure logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode, generating SQL scripts without a database connection.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,  # Use literal SQL values
        dialect_opts={"paramstyle": "named"},  # Named parameters for SQL
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode against settings.DATABASE_URL.

    Uses a non-pooled connection to avoid conflicts during migrations.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # Disable pooling for migrations
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
