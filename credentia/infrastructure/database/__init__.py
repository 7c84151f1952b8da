from .async_db import (
    build_async_engine,
    build_session_factory,
    create_async_db_and_tables,
    get_async_db,
)

__all__ = [
    "build_async_engine",
    "build_session_factory",
    "create_async_db_and_tables",
    "get_async_db",
]
