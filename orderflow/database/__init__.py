"""
Async database access: engine, session factory and helpers.
"""

from orderflow.database.async_db import (
    close_db_connections,
    create_async_database_engine,
    create_session_factory,
    get_async_engine,
    get_session_factory,
    init_db,
)

__all__ = [
    "create_async_database_engine",
    "create_session_factory",
    "get_async_engine",
    "get_session_factory",
    "init_db",
    "close_db_connections",
]
